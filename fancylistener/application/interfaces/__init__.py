from .listener_repository import ListenerRepository

__all__ = [
    "ListenerRepository",
]
