"""
In-process bookkeeping for HTTP-driven resolutions.
Progress snapshots keyed by request id, and one generation tracker per client.
"""
import time
from threading import Lock
from typing import Dict

from ..providers.orchestrator import ResolutionTracker

# Snapshots and client trackers older than this are dropped on the next write or lookup
PROGRESS_TTL = 600

resolve_progress_storage: Dict[str, dict] = {}
resolve_progress_lock = Lock()

client_trackers: Dict[str, ResolutionTracker] = {}
client_trackers_last_used: Dict[str, float] = {}
client_trackers_lock = Lock()


# === Resolve Progress Management ===

def store_resolve_progress(request_id: str, progress_data: dict):
    """Store the latest progress snapshot for a resolution"""
    now = time.time()
    with resolve_progress_lock:
        expired = [k for k, v in resolve_progress_storage.items() if now - v["timestamp"] > PROGRESS_TTL]
        for key in expired:
            del resolve_progress_storage[key]
        resolve_progress_storage[request_id] = {
            **progress_data,
            "timestamp": now,
        }


def get_resolve_progress(request_id: str) -> dict:
    """Get the latest progress snapshot for a resolution"""
    with resolve_progress_lock:
        return dict(resolve_progress_storage.get(request_id, {}))


def clear_resolve_progress(request_id: str):
    """Clear the progress snapshot for a resolution"""
    with resolve_progress_lock:
        resolve_progress_storage.pop(request_id, None)


# === Per-client generation tracking ===

def get_client_tracker(client_id: str) -> ResolutionTracker:
    """
    Tracker shared by every resolution a client starts; the newest one wins.
    Trackers unused for longer than PROGRESS_TTL are dropped on the next lookup.
    """
    now = time.time()
    with client_trackers_lock:
        expired = [k for k, t in client_trackers_last_used.items() if now - t > PROGRESS_TTL]
        for key in expired:
            client_trackers.pop(key, None)
            del client_trackers_last_used[key]
        client_trackers_last_used[client_id] = now
        tracker = client_trackers.get(client_id)
        if tracker is None:
            tracker = client_trackers[client_id] = ResolutionTracker()
        return tracker
