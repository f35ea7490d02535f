"""Short link domain exports."""

from .exceptions import LinkError, LinkNotFoundError, LinkValidationError
from .models import ShortLink
from .service import ShortLinkService

__all__ = [
    "LinkError",
    "LinkNotFoundError",
    "LinkValidationError",
    "ShortLink",
    "ShortLinkService",
]
