"""
Utils package initialization.
Re-exports the resolution bookkeeping helpers for easier imports.
"""

__all__ = [
    'store_resolve_progress',
    'get_resolve_progress',
    'clear_resolve_progress',
    'get_client_tracker',
]

from .progress import (
    store_resolve_progress,
    get_resolve_progress,
    clear_resolve_progress,
    get_client_tracker,
)
