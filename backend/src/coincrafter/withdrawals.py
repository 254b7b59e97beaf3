"""
Withdrawal lifecycle: pending -> approved.
Coins leave the worker's balance at approval, not at request time.
"""
from decimal import Decimal, ROUND_DOWN
from typing import List

from .auth import Actor
from .config import config
from .errors import NotFound
from .ledger import CoinLedger
from .logging import logger
from .models import Collection, Withdrawal, WithdrawalStatus, check_transition, utc_now
from .notifications import Notifier
from .operations import Transition
from .repository import Repository
from .schemas import WithdrawalRequest


def coins_to_dollars(coins: int) -> Decimal:
    """Cash value of a coin amount at the configured rate."""
    rate = Decimal(config.WITHDRAWAL_COINS_PER_DOLLAR)
    return (Decimal(coins) / rate).quantize(Decimal('0.01'), rounding=ROUND_DOWN)


class WithdrawalService:

    def __init__(self, repository: Repository, ledger: CoinLedger, notifier: Notifier):
        self.repository = repository
        self.ledger = ledger
        self.notifier = notifier

    def get(self, withdrawal_id: str) -> Withdrawal:
        item = self.repository.get(Collection.WITHDRAWALS, withdrawal_id)
        if not item:
            raise NotFound(f'Withdrawal {withdrawal_id} not found')
        return Withdrawal.from_item(item)

    def request(self, worker: Actor, request: WithdrawalRequest) -> Withdrawal:
        withdrawal = Withdrawal(
            worker_email=worker.email,
            worker_name=worker.name,
            withdrawal_coin=request.withdrawal_coin,
            withdrawal_amount=coins_to_dollars(request.withdrawal_coin),
            payment_system=request.payment_system,
            account_number=request.account_number,
        )
        self.repository.put(Collection.WITHDRAWALS, withdrawal.to_item())
        logger.info(f"Withdrawal {withdrawal.withdrawal_id} requested by {worker.email} for {request.withdrawal_coin} coins")

        self.notifier.notify_admins(
            f'{worker.email} requested a withdrawal of {request.withdrawal_coin} coins',
            '/dashboard/admin-home'
        )
        return withdrawal

    def approve(self, withdrawal_id: str, admin_email: str) -> dict:
        """
        Debit the worker and mark the withdrawal approved in one unit.
        On InsufficientBalance the status stays pending and no coins move.
        """
        withdrawal = self.get(withdrawal_id)
        check_transition(Collection.WITHDRAWALS, withdrawal.status, WithdrawalStatus.APPROVED)

        approved_at = utc_now()
        self.ledger.commit(
            [self.ledger.debit_entry(withdrawal.worker_email, withdrawal.withdrawal_coin)],
            effects=[
                Transition(
                    Collection.WITHDRAWALS, withdrawal_id,
                    current=WithdrawalStatus.PENDING,
                    target=WithdrawalStatus.APPROVED,
                    values={'approvedAt': approved_at}
                )
            ]
        )
        logger.info(f"Withdrawal {withdrawal_id} approved by {admin_email}")

        self.notifier.notify(
            f'You approved a withdrawal of {withdrawal.withdrawal_coin} coins for {withdrawal.worker_email}',
            admin_email,
            '/dashboard/admin-home'
        )
        self.notifier.notify(
            f'Your withdrawal of {withdrawal.withdrawal_coin} coins '
            f'(${withdrawal.withdrawal_amount}) has been approved',
            withdrawal.worker_email,
            '/dashboard/worker-home'
        )
        return {'approved': True, 'updated': 1}

    def list_pending(self) -> List[Withdrawal]:
        withdrawals = [
            Withdrawal.from_item(item)
            for item in self.repository.find(Collection.WITHDRAWALS, status=WithdrawalStatus.PENDING)
        ]
        withdrawals.sort(key=lambda w: w.requested_at)
        return withdrawals

    def list_for_worker(self, worker_email: str) -> List[Withdrawal]:
        withdrawals = [
            Withdrawal.from_item(item)
            for item in self.repository.find(Collection.WITHDRAWALS, worker_email=worker_email)
        ]
        withdrawals.sort(key=lambda w: w.requested_at, reverse=True)
        return withdrawals
