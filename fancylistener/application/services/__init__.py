from .listener_service import ListenerService

__all__ = [
    "ListenerService",
]
