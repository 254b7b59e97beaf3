"""
Create Payment Intent Handler.
POST /payments/intent
Body: { "amount": 10.00 }

Returns the client secret the frontend uses to complete the charge.
"""
from coincrafter.api import api_handler, read_body
from coincrafter.schemas import PaymentIntentRequest


@api_handler()
def handler(event, services, actor):
    request = read_body(event, PaymentIntentRequest)
    return services.payments.create_intent(request)
