from .config import Config, config
from .errors import (
    AggregateNoStreamFoundError,
    DuplicateProviderError,
    FetchError,
    FetchTimeoutError,
    NotFoundError,
    ProviderCrashError,
    ScrapeError,
    StaleResolutionError,
    UnsupportedMediaTypeError,
    UpstreamShapeError,
    ValidationError,
)

__all__ = [
    "Config",
    "config",
    "AggregateNoStreamFoundError",
    "DuplicateProviderError",
    "FetchError",
    "FetchTimeoutError",
    "NotFoundError",
    "ProviderCrashError",
    "ScrapeError",
    "StaleResolutionError",
    "UnsupportedMediaTypeError",
    "UpstreamShapeError",
    "ValidationError",
]
