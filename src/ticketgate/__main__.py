"""Run the ticketgate API server."""

from __future__ import annotations

import uvicorn

from ticketgate.api import create_app
from ticketgate.config import Settings
from ticketgate.logging import setup_logging


def main() -> None:
    """Load settings, configure logging and serve the API."""
    setup_logging()
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
