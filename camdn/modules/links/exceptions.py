"""Short link domain specific exceptions."""


class LinkError(Exception):
    """Base class for short link errors."""


class LinkNotFoundError(LinkError):
    """Raised when a short id is unknown."""


class LinkValidationError(LinkError):
    """Raised when a link request is missing its target URL."""


class ShortIdExhaustedError(LinkError):
    """Raised when no free short id could be generated."""
