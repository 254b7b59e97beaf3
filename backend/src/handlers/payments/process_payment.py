"""
Process Payment Handler.
POST /payments
Body: { "transactionId": "pi_...", "amount": 10.00, "coins": 150 }

Records a completed charge and credits the purchased coins. A transactionId
that was already recorded is answered with 409 and credits nothing.
"""
from coincrafter.api import api_handler, read_body
from coincrafter.schemas import RecordPaymentRequest


@api_handler(status=201)
def handler(event, services, actor):
    request = read_body(event, RecordPaymentRequest)
    payment = services.payments.record(actor.email, request)
    return {
        'message': 'Payment recorded',
        'transactionId': payment.transaction_id,
        'coins': payment.coins,
        'newBalance': services.ledger.balance(actor.email)
    }
