"""
Coin Ledger.

Every change to a user's coins is an atomic ADD at the store. Debits carry
their balance check in the same write, so the check cannot be separated from
the decrement by a concurrent request. Transitions that move coins build
their ledger entries here and hand them to Repository.apply() together with
the records they change.
"""
from typing import List, Sequence

from .errors import UserNotFound, ValidationError
from .logging import logger
from .models import Collection
from .operations import AdjustCoins, Operation
from .repository import Repository


def _require_positive(amount) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(f'Coin amount must be a positive integer, got {amount!r}')
    return amount


class CoinLedger:
    """Balance mutations with pre-conditions."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def credit_entry(self, email: str, amount: int) -> AdjustCoins:
        return AdjustCoins(key=email, delta=_require_positive(amount))

    def debit_entry(self, email: str, amount: int) -> AdjustCoins:
        """Decrement guarded by `coins >= amount`; fails with InsufficientBalance."""
        return AdjustCoins(key=email, delta=-_require_positive(amount))

    def commit(self, entries: Sequence[AdjustCoins], effects: Sequence[Operation] = ()) -> None:
        """
        Apply ledger entries and the state changes that depend on them as one
        unit. Nothing is written if any balance check or effect condition fails.
        Effects go first so a status guard reports before a balance check.
        """
        operations: List[Operation] = list(effects) + list(entries)
        self.repository.apply(operations)
        for entry in entries:
            logger.info(f"Ledger: {entry.delta:+d} coins for {entry.email}")

    def credit(self, email: str, amount: int) -> None:
        self.commit([self.credit_entry(email, amount)])

    def debit(self, email: str, amount: int) -> None:
        self.commit([self.debit_entry(email, amount)])

    def balance(self, email: str) -> int:
        user = self.repository.get(Collection.USERS, email)
        if user is None:
            raise UserNotFound(email)
        return int(user.get('coins', 0))
