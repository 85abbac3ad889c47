from .listener_record import CLIENT_FIELDS, UNKNOWN, ListenerRecord

__all__ = [
    "CLIENT_FIELDS",
    "UNKNOWN",
    "ListenerRecord",
]
