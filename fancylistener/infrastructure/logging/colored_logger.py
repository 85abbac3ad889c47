"""Colored event logger — ANSI-colored console logging for listener traffic.

Provides a ListenerEventLogger with color-coded output per event kind,
so ingestion and deletions are easy to follow in the terminal while the
extension is browsing.

Color scheme:
    🟢 Green   — Ingested listeners
    🟡 Yellow  — Single deletions
    🟣 Magenta — Store cleared
    🔵 Cyan    — Mirror file load / write
    ⚪ Gray    — Details
"""

import logging
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Event Kinds ──────────────────────────────────────────────────────

class ListenerEvent:
    """Predefined event kinds with colors and icons."""

    INGEST = ("INGEST", _Colors.GREEN, "📥")
    DELETE = ("DELETE", _Colors.YELLOW, "🗑️")
    CLEAR = ("CLEAR", _Colors.MAGENTA, "🧹")
    STORE = ("STORE", _Colors.CYAN, "💾")
    SERVER = ("SERVER", _Colors.WHITE, "⚙️")


# ── ListenerEventLogger ──────────────────────────────────────────────

class ListenerEventLogger:
    """Color-coded logger for listener events.

    Usage:
        log = ListenerEventLogger("ListenerService")
        log.event(ListenerEvent.INGEST, "Listener detected: example.com", url="https://example.com/")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._component = component_name

    def event(self, kind: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log one event with its kind color."""
        label, color, icon = kind
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            formatted += f" {_Colors.GRAY}({details}){_Colors.RESET}"
        self._logger.info(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
            formatted += f" {_Colors.DIM}({details}){_Colors.RESET}"
        self._logger.info(formatted)

    def separator(self, title: str = "") -> None:
        """Log a visual separator line."""
        if title:
            self._logger.info(
                f"{_Colors.GRAY}{'─' * 10} {title} {'─' * max(0, 50 - len(title))}{_Colors.RESET}"
            )
        else:
            self._logger.info(f"{_Colors.GRAY}{'─' * 60}{_Colors.RESET}")
