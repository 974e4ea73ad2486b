"""Ticketing: issue tracker integration for finished analyses."""

__version__ = "1.0.0"

from .config import YouTrackConfig
from .exceptions import TicketingError
from .youtrack import YouTrackClient

__all__ = [
    "__version__",
    "YouTrackConfig",
    "YouTrackClient",
    "TicketingError",
]
