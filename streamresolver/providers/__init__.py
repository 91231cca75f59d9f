from typing import Optional

from .base import ProxiedFetchClient
from .netfilm import NetfilmProvider
from .orchestrator import (
    ProgressEvent,
    ResolutionToken,
    ResolutionTracker,
    ScrapeOrchestrator,
)
from .registry import Provider, ProviderRegistry, ScrapeContext


def build_default_registry(fetch: Optional[ProxiedFetchClient] = None) -> ProviderRegistry:
    """Registry with every built-in provider, sharing one fetch client"""
    fetch = fetch or ProxiedFetchClient()
    return ProviderRegistry([
        NetfilmProvider(fetch=fetch),
    ])


__all__ = [
    "NetfilmProvider",
    "ProgressEvent",
    "Provider",
    "ProviderRegistry",
    "ProxiedFetchClient",
    "ResolutionToken",
    "ResolutionTracker",
    "ScrapeContext",
    "ScrapeOrchestrator",
    "build_default_registry",
]
