"""State/store layer.

The value store is the single place where decoded stream updates are
kept.  Only the latest value per path is retained.
"""

from pysignalk.state.events import ValueUpdate
from pysignalk.state.store import ValueStore

__all__ = ["ValueStore", "ValueUpdate"]
