"""Asset domain exports."""

from .exceptions import AssetError, AssetNotFoundError, StorageError, UploadTooLargeError, UploadValidationError
from .models import Dimensions, DimensionRecord, StoredAsset
from .pipeline import StoredUpload, UploadPipeline
from .prober import DimensionProber
from .renderer import Redirect, RenderDispatcher, ViewPage
from .repository import DimensionCache, InMemoryDimensionCache

__all__ = [
    "AssetError",
    "AssetNotFoundError",
    "StorageError",
    "UploadTooLargeError",
    "UploadValidationError",
    "Dimensions",
    "DimensionRecord",
    "StoredAsset",
    "StoredUpload",
    "UploadPipeline",
    "DimensionProber",
    "Redirect",
    "RenderDispatcher",
    "ViewPage",
    "DimensionCache",
    "InMemoryDimensionCache",
]
