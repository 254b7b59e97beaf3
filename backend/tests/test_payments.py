"""
Tests for payment ingestion and the payment-intent gateway.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from coincrafter.app import Services
from coincrafter.errors import Conflict, UserNotFound
from coincrafter.models import Collection
from coincrafter.payments import MockPaymentGateway, PaymentGateway, to_minor_units
from coincrafter.schemas import PaymentIntentRequest, RecordPaymentRequest

BUYER = 'buyer@example.com'


def payment_request(transaction_id='pi_123', amount='10.00', coins=150):
    return RecordPaymentRequest.model_validate({
        'transactionId': transaction_id, 'amount': amount, 'coins': coins
    })


class TestRecordPayment:

    def test_credits_purchased_coins(self, services, repository, add_user, coins):
        add_user(BUYER, coins=20)

        payment = services.payments.record(BUYER, payment_request())

        assert coins(BUYER) == 170
        stored = repository.get(Collection.PAYMENTS, 'pi_123')
        assert stored['email'] == BUYER
        assert stored['amount'] == Decimal('10.00')
        assert stored['coins'] == 150
        assert payment.transaction_id == 'pi_123'

    def test_replayed_transaction_does_not_credit_again(self, services, repository, add_user, coins):
        add_user(BUYER, coins=0)
        services.payments.record(BUYER, payment_request())

        with pytest.raises(Conflict):
            services.payments.record(BUYER, payment_request())

        assert coins(BUYER) == 150
        assert len(repository.find(Collection.PAYMENTS)) == 1

    def test_unknown_user_records_nothing(self, services, repository):
        with pytest.raises(UserNotFound):
            services.payments.record('ghost@example.com', payment_request())

        assert repository.get(Collection.PAYMENTS, 'pi_123') is None

    def test_history_newest_first(self, services, add_user):
        add_user(BUYER)
        services.payments.record(BUYER, payment_request('pi_1'))
        services.payments.record(BUYER, payment_request('pi_2', amount='20', coins=500))

        history = services.payments.list_for(BUYER)

        assert {p.transaction_id for p in history} == {'pi_1', 'pi_2'}
        assert history[0].date >= history[1].date


class TestPaymentIntent:

    def test_gateway_receives_minor_units(self, repository):
        gateway = MagicMock(spec=PaymentGateway)
        gateway.create_intent.return_value = 'pi_abc_secret_xyz'
        services = Services(repository, payment_gateway=gateway)

        result = services.payments.create_intent(PaymentIntentRequest.model_validate({'amount': '19.99'}))

        assert result == {'clientSecret': 'pi_abc_secret_xyz'}
        gateway.create_intent.assert_called_once_with(1999, 'usd')

    def test_mock_gateway_returns_a_secret(self):
        secret = MockPaymentGateway().create_intent(1000, 'usd')

        assert secret.startswith('pi_mock_')
        assert '_secret_' in secret

    def test_minor_units_rounding(self):
        assert to_minor_units(Decimal('1')) == 100
        assert to_minor_units(Decimal('0.015')) == 2
