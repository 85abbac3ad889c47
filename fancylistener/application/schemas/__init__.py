from .listener import (
    AuditListener,
    AuditReport,
    AuditSummary,
    ListenerCreate,
    ListenerResponse,
    OperationResponse,
    StatsResponse,
)

__all__ = [
    "AuditListener",
    "AuditReport",
    "AuditSummary",
    "ListenerCreate",
    "ListenerResponse",
    "OperationResponse",
    "StatsResponse",
]
