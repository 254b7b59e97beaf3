"""
Service container.

Built once per Lambda container on first use and reused across invocations.
Tests and local runs install their own container with `configure()`.
"""
from typing import Optional

from .auth import IdentityGate
from .config import config
from .ledger import CoinLedger
from .logging import logger
from .notifications import Notifier
from .payments import MockPaymentGateway, PaymentGateway, PaymentService
from .repository import Repository
from .stats import StatsService
from .submissions import SubmissionService
from .tasks import TaskService
from .users import UserService
from .withdrawals import WithdrawalService


class Services:
    """Every service wired to one repository."""

    def __init__(self, repository: Repository, payment_gateway: Optional[PaymentGateway] = None):
        self.repository = repository
        self.identity = IdentityGate(repository)
        self.ledger = CoinLedger(repository)
        self.notifier = Notifier(repository)
        self.users = UserService(repository, self.ledger)
        self.tasks = TaskService(repository, self.ledger, self.notifier)
        self.submissions = SubmissionService(repository, self.ledger, self.notifier)
        self.withdrawals = WithdrawalService(repository, self.ledger, self.notifier)
        self.payments = PaymentService(
            repository, self.ledger, self.notifier, payment_gateway or MockPaymentGateway()
        )
        self.stats = StatsService(repository)


_services: Optional[Services] = None


def build_repository() -> Repository:
    if config.STORAGE_BACKEND == 'memory':
        from .memory import InMemoryRepository
        return InMemoryRepository()
    from .dynamo import DynamoRepository
    return DynamoRepository()


def get_services() -> Services:
    global _services
    if _services is None:
        logger.info(f"Initializing services with {config.STORAGE_BACKEND} storage")
        _services = Services(build_repository())
    return _services


def configure(services: Optional[Services]) -> None:
    """Install a container (or None to rebuild from config on next use)."""
    global _services
    _services = services
