"""
In-process repository.
Backs local runs (STORAGE_BACKEND=memory) and the test suite.
"""
import copy
import threading
from typing import Any, Dict, List, Optional, Sequence

from .logging import logger
from .models import KEYS
from .operations import Operation
from .repository import Repository


class InMemoryRepository(Repository):
    """Dict-per-collection store; `apply` runs under one lock."""

    def __init__(self):
        self._tables: Dict[str, Dict[Any, dict]] = {name: {} for name in KEYS}
        self._lock = threading.RLock()

    def get(self, collection: str, key: Any) -> Optional[Dict[str, Any]]:
        with self._lock:
            item = self._tables[collection].get(key)
            return copy.deepcopy(item)

    def find(self, collection: str, **equals) -> List[Dict[str, Any]]:
        with self._lock:
            return [
                copy.deepcopy(item)
                for item in self._tables[collection].values()
                if all(item.get(name) == value for name, value in equals.items())
            ]

    def apply(self, operations: Sequence[Operation]) -> None:
        with self._lock:
            # Check every condition before touching anything
            for operation in operations:
                current = self._tables[operation.collection].get(operation.key)
                if not operation.check(current):
                    raise operation.error(copy.deepcopy(current))

            for operation in operations:
                table = self._tables[operation.collection]
                updated = operation.mutate(table.get(operation.key))
                if updated is None:
                    table.pop(operation.key, None)
                else:
                    table[operation.key] = copy.deepcopy(updated)

        logger.debug(f"Applied {len(operations)} operations in memory")
