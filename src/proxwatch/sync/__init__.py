"""Data-synchronization layer.

Controllers in this package keep a client-side view of one remote
resource eventually consistent with the backend: they track
loading/error/data state, arbitrate overlapping fetch attempts, and
(for polling controllers) own the timer driving periodic refreshes.
"""

from proxwatch.sync.polling import PollingController
from proxwatch.sync.resource import ResourceController
from proxwatch.sync.state import DependencyKey, FetchState

__all__ = [
    "DependencyKey",
    "FetchState",
    "PollingController",
    "ResourceController",
]
