"""Confluence client - Page read and versioned page update."""

from ticketgate.confluence.client import ConfluenceClient
from ticketgate.confluence.markdown import html_to_markdown
from ticketgate.confluence.models import ConnectionStatus, Page, PageUpdateResult

__all__ = [
    "ConfluenceClient",
    "ConnectionStatus",
    "Page",
    "PageUpdateResult",
    "html_to_markdown",
]
