"""Entry point for running folio as a module or installed script.

Usage:
    folio / python -m folio                     → web app (uvicorn)
    folio <command> ... / python -m folio <command> ... → CLI
"""

import logging
import sys

import uvicorn
from rich.logging import RichHandler


def configure_logging(verbose: bool = False) -> None:
    """Route ``logging`` through rich; debug output with *verbose*."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def serve(host: str = "127.0.0.1", port: int = 8000, reload: bool = False) -> None:
    """Run the web app with uvicorn."""
    uvicorn.run("folio.gui.app:app", host=host, port=port, reload=reload, log_config=None)


def run() -> None:
    """Entry point: no args → web app, else → CLI."""
    if len(sys.argv) == 1:
        configure_logging()
        serve(reload=True)
    else:
        from folio.cli import run_cli
        sys.exit(run_cli())


if __name__ == "__main__":
    run()
