"""
Error taxonomy shared by providers, the registry and the orchestrator
"""
from typing import List, Optional, Tuple


class ScrapeError(Exception):
    """Base class for every error raised while resolving a stream"""


class ValidationError(ScrapeError):
    """Caller supplied malformed media metadata"""


class NotFoundError(ScrapeError):
    """No search, season or episode match (or no registered provider with that id)"""


class UnsupportedMediaTypeError(ScrapeError):
    """Media type is outside the provider's supported types"""


class UpstreamShapeError(ScrapeError):
    """A field the provider relies on is absent or malformed in the upstream JSON"""


class ProviderCrashError(ScrapeError):
    """A provider raised something outside the taxonomy; wraps the original exception"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class FetchError(ScrapeError):
    """Network failure, timeout or non-2xx response from an upstream"""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status = status
        self.cause = cause


class FetchTimeoutError(FetchError):
    """The upstream did not answer within the request timeout"""


class DuplicateProviderError(ScrapeError):
    """A provider with the same id is already registered"""


class StaleResolutionError(ScrapeError):
    """The resolution was superseded by a newer one and its result must be discarded"""


class AggregateNoStreamFoundError(ScrapeError):
    """
    Every eligible provider failed.

    ``failures`` keeps the ``(provider_id, error)`` pairs in the order the
    providers were tried.
    """

    def __init__(self, failures: List[Tuple[str, ScrapeError]]):
        self.failures = list(failures)
        if self.failures:
            detail = ", ".join(f"{pid}: {err}" for pid, err in self.failures)
            message = f"No stream found ({detail})"
        else:
            message = "No stream found (no provider supports this media type)"
        super().__init__(message)

    def to_dict(self) -> List[dict]:
        return [
            {"provider": pid, "error": type(err).__name__, "message": str(err)}
            for pid, err in self.failures
        ]
