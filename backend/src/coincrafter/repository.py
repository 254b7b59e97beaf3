"""
Abstract repository interface over the platform's collections.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from .operations import Operation, Put


class Repository(ABC):
    """
    Storage seam used by every service.

    Reads return plain dicts keyed by stored attribute names. All writes go
    through `apply`, which is atomic across the operations it is given.
    """

    @abstractmethod
    def get(self, collection: str, key: Any) -> Optional[Dict[str, Any]]:
        """Return one item by key, or None."""

    @abstractmethod
    def find(self, collection: str, **equals) -> List[Dict[str, Any]]:
        """Return every item whose attributes equal the given values."""

    @abstractmethod
    def apply(self, operations: Sequence[Operation]) -> None:
        """
        Apply all operations or none.

        Raises the failing operation's error() when a condition does not hold.
        """

    def put(self, collection: str, item: Dict[str, Any]) -> None:
        """Insert a single item (conditional on its key being new)."""
        self.apply([Put(collection, item=item)])
