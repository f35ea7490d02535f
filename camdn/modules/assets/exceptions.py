"""Asset domain specific exceptions."""


class AssetError(Exception):
    """Base class for asset related domain errors."""


class AssetNotFoundError(AssetError):
    """Raised when a requested asset is absent or its path is not acceptable."""


class UploadValidationError(AssetError):
    """Raised when an upload is missing required information."""


class StorageError(AssetError):
    """Raised when an upload could not be written to disk."""


class ToolError(AssetError):
    """Raised when an external tool fails, times out or cannot be started."""


class UploadTooLargeError(AssetError):
    """Raised when an upload passes the configured size ceiling mid-stream."""
