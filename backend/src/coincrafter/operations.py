"""
Write operations accepted by Repository.apply().

Each operation names one item, carries the condition it must meet and the
mutation to perform. A repository applies a list of operations as one
all-or-nothing unit; when a condition fails it asks the failing operation
for the domain error to raise, given the item as currently stored.

`check` and `mutate` are the reference semantics used by the in-process
store. The DynamoDB store renders the same operations as TransactWriteItems.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .errors import AlreadyExists, Conflict, InsufficientBalance, InvalidTransition, NotFound, UserNotFound
from .models import Collection, KEYS


@dataclass
class Operation:
    collection: str
    key: Any

    @property
    def key_name(self) -> str:
        return KEYS[self.collection]

    def check(self, item: Optional[dict]) -> bool:
        return item is not None

    def mutate(self, item: Optional[dict]) -> Optional[dict]:
        raise NotImplementedError

    def error(self, item: Optional[dict]) -> Exception:
        if item is None:
            return NotFound(f'{self.collection[:-1].capitalize()} {self.key} not found')
        return Conflict(f'{self.collection[:-1].capitalize()} {self.key} was modified concurrently')


@dataclass
class Put(Operation):
    """Insert a new item; fails if the key is already taken."""
    key: Any = None
    item: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.key = self.item[self.key_name]

    def check(self, item):
        return item is None

    def mutate(self, item):
        return dict(self.item)

    def error(self, item):
        return AlreadyExists(f'{self.collection[:-1].capitalize()} {self.key} already exists', key=self.key)


@dataclass
class Update(Operation):
    """SET attributes on an existing item whose `expected` attributes match."""
    values: Dict[str, Any] = field(default_factory=dict)
    expected: Dict[str, Any] = field(default_factory=dict)

    def check(self, item):
        if item is None:
            return False
        return all(item.get(name) == value for name, value in self.expected.items())

    def mutate(self, item):
        return {**item, **self.values}


@dataclass
class Transition(Update):
    """Compare-and-swap on `status`: current -> target, plus extra values."""
    current: str = ''
    target: str = ''

    def __post_init__(self):
        self.expected = {**self.expected, 'status': self.current}
        self.values = {**self.values, 'status': self.target}

    def error(self, item):
        if item is None:
            return super().error(item)
        return InvalidTransition(
            f'{self.collection[:-1].capitalize()} {self.key} is {item.get("status")}, '
            f'cannot move to {self.target}'
        )


@dataclass
class Increment(Operation):
    """Atomic ADD on a numeric attribute, optionally guarded by a floor."""
    attribute: str = ''
    delta: int = 0
    at_least: Optional[int] = None

    def check(self, item):
        if item is None:
            return False
        if self.at_least is not None:
            return item.get(self.attribute, 0) >= self.at_least
        return True

    def mutate(self, item):
        return {**item, self.attribute: item.get(self.attribute, 0) + self.delta}

    def error(self, item):
        if item is None:
            return super().error(item)
        return InvalidTransition(
            f'{self.collection[:-1].capitalize()} {self.key} has no {self.attribute} left'
        )


@dataclass
class Delete(Operation):
    """Remove an item whose `expected` attributes match."""
    expected: Dict[str, Any] = field(default_factory=dict)

    def check(self, item):
        if item is None:
            return False
        return all(item.get(name) == value for name, value in self.expected.items())

    def mutate(self, item):
        return None


@dataclass
class AdjustCoins(Increment):
    """
    Ledger primitive: atomic ADD on a user's coins.
    A negative delta is guarded by `coins >= -delta` in the same write.
    """
    collection: str = Collection.USERS
    key: Any = None
    attribute: str = 'coins'

    def __post_init__(self):
        if self.delta < 0:
            self.at_least = -self.delta

    @property
    def email(self) -> str:
        return self.key

    def error(self, item):
        if item is None:
            return UserNotFound(self.key)
        return InsufficientBalance(self.key, int(item.get('coins', 0)), -self.delta)
