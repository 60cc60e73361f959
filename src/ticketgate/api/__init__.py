"""REST API for ticketgate."""

from ticketgate.api.app import app, create_app
from ticketgate.api.models import APIResponse

__all__ = [
    "APIResponse",
    "app",
    "create_app",
]
