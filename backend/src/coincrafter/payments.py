"""
Payment ingestion.

Coins are bought through an external processor: the client gets a charge
intent's secret, completes the charge, then reports the transaction here.
Recording is idempotent on transactionId.
"""
import uuid
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from .config import config
from .errors import AlreadyExists, Conflict
from .ledger import CoinLedger
from .logging import logger
from .models import Collection, Payment
from .notifications import Notifier
from .operations import Put
from .repository import Repository
from .schemas import PaymentIntentRequest, RecordPaymentRequest


class PaymentGateway(ABC):
    """External processor seam: create a charge intent, get a client secret."""

    @abstractmethod
    def create_intent(self, amount_minor: int, currency: str) -> str:
        """Return the client secret for a charge of `amount_minor` units."""


class MockPaymentGateway(PaymentGateway):
    """
    Mock processor - in production this would call Stripe's PaymentIntent API.
    No charge is made.
    """

    def create_intent(self, amount_minor: int, currency: str) -> str:
        intent_id = f'pi_mock_{uuid.uuid4().hex[:24]}'
        logger.info(f"Mock payment intent {intent_id} for {amount_minor} {currency}")
        return f'{intent_id}_secret_{uuid.uuid4().hex[:24]}'


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


class PaymentService:

    def __init__(
        self,
        repository: Repository,
        ledger: CoinLedger,
        notifier: Notifier,
        gateway: PaymentGateway
    ):
        self.repository = repository
        self.ledger = ledger
        self.notifier = notifier
        self.gateway = gateway

    def create_intent(self, request: PaymentIntentRequest) -> dict:
        amount_minor = to_minor_units(request.amount)
        client_secret = self.gateway.create_intent(amount_minor, config.PAYMENT_CURRENCY)
        return {'clientSecret': client_secret}

    def record(self, email: str, request: RecordPaymentRequest) -> Payment:
        """
        Store the payment and credit the coins in one unit.

        The insert is conditional on an unseen transactionId, so a replayed
        call raises Conflict and credits nothing. A transient storage conflict
        raises Unavailable instead: nothing was written and the client should
        retry with the same transactionId.

        The coin amount is taken as reported. Checking it against the amount
        actually charged belongs to the processor's webhook, which is the only
        party that sees the settled charge.
        """
        payment = Payment(
            transaction_id=request.transaction_id,
            email=email,
            amount=request.amount,
            coins=request.coins,
        )
        try:
            self.ledger.commit(
                [self.ledger.credit_entry(email, request.coins)],
                effects=[Put(Collection.PAYMENTS, item=payment.to_item())]
            )
        except AlreadyExists as e:
            if e.key != payment.transaction_id:
                raise
            logger.warning(f"Duplicate payment {request.transaction_id} from {email} ignored")
            raise Conflict(f'Transaction {request.transaction_id} was already recorded') from e

        logger.info(f"Payment {payment.transaction_id}: {email} bought {payment.coins} coins for {payment.amount}")
        self.notifier.notify(
            f'Payment received: {payment.coins} coins were added to your account',
            email,
            '/dashboard/payment-history'
        )
        return payment

    def list_for(self, email: str) -> List[Payment]:
        payments = [Payment.from_item(item) for item in self.repository.find(Collection.PAYMENTS, email=email)]
        payments.sort(key=lambda p: p.date, reverse=True)
        return payments
