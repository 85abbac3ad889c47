"""FancyListener CLI — fancylistener -o <output-directory> [-p <port>].

Validates the port and output directory before the server binds, then
runs the application under uvicorn with a single worker.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

logger = logging.getLogger(__name__)

WRITE_TEST_FILE = ".write-test"

USAGE = """\
Usage: fancylistener -o <output-directory> [-p <port>]

Options:
  -o <output-directory>  Required. Directory where listeners.json will be saved
  -p <port>              Optional. Port to listen on (default: 3000)
  --host <address>       Optional. Bind address (default: 127.0.0.1)

Example:
  fancylistener -o ./logs
  fancylistener -o /var/log/fancylistener -p 8080"""


class StartupError(Exception):
    """Raised when the server cannot be started with the given arguments."""


class _ArgumentParser(argparse.ArgumentParser):
    """Raise StartupError on bad arguments instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise StartupError(f"{message}\nUsage: {self.usage}")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the fancylistener CLI."""
    parser = _ArgumentParser(
        prog="fancylistener",
        description="Collect FancyTracker listener reports into a JSON file.",
        usage="fancylistener -o <output-directory> [-p <port>]",
    )
    parser.add_argument("-o", "--output", dest="output", help="Directory where listeners.json will be saved")
    parser.add_argument("-p", "--port", dest="port", default="3000", help="Port to listen on")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    return parser


def _get_version() -> str:
    from fancylistener import __version__

    return __version__


def parse_port(raw: str) -> int:
    """Parse a TCP port, raising StartupError unless it is an integer in 1–65535."""
    try:
        port = int(raw)
    except (TypeError, ValueError):
        port = 0
    if not 1 <= port <= 65535:
        raise StartupError("Invalid port number. Must be between 1 and 65535.")
    return port


def prepare_output_dir(raw: str) -> Path:
    """Resolve, create and write-check the output directory.

    Returns the absolute path. Raises StartupError when the path contains
    ``~``, cannot be created, or is not writable.
    """
    if "~" in raw:
        raise StartupError("Output path contains invalid characters")

    path = Path(raw).resolve()
    if not path.exists():
        try:
            path.mkdir(parents=True)
        except OSError as exc:
            raise StartupError(f"Unable to create output directory: {exc}") from exc
        logger.info("Created output directory: %s", path)

    marker = path / WRITE_TEST_FILE
    try:
        marker.write_text("test", encoding="utf-8")
        marker.unlink()
    except OSError as exc:
        raise StartupError(f"Output directory is not writable: {exc}") from exc
    return path


def _fail(message: str) -> NoReturn:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    try:
        args = _build_parser().parse_args(argv)
        port = parse_port(args.port)
        if not args.output:
            raise StartupError(
                "Output directory (-o) is required.\n"
                "Usage: fancylistener -o <output-directory> [-p <port>]"
            )
    except StartupError as exc:
        _fail(str(exc))

    import uvicorn

    from fancylistener.config import Settings
    from fancylistener.infrastructure.logging.colored_logger import ListenerEvent, ListenerEventLogger
    from fancylistener.infrastructure.logging.log_config import setup_logging
    from fancylistener.main import create_app

    settings = Settings(host=args.host, port=port)
    setup_logging(settings)

    try:
        output_path = prepare_output_dir(args.output)
    except StartupError as exc:
        _fail(str(exc))
    settings = settings.model_copy(update={"output_path": str(output_path)})

    app = create_app(settings)
    _log_banner(ListenerEventLogger("fancylistener"), ListenerEvent.SERVER, settings)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level_uvicorn.lower(),
    )


def _log_banner(log, kind, settings) -> None:
    base_url = f"http://localhost:{settings.port}"
    log.separator("FancyListener Server")
    log.event(kind, f"Port: {settings.port}")
    log.detail(f"Output directory: {settings.output_path}")
    log.detail(f"Listeners file: {settings.listeners_file}")
    log.detail(f"API endpoint: {base_url}/api/listeners")
    log.detail(f"Web interface: {base_url}")
    log.separator()
    log.event(kind, "Configure FancyTracker extension to use:", endpoint=f"{base_url}/api/listeners")
    log.event(kind, "Waiting for listeners...")
