"""
List Payments Handler.
GET /payments - the caller's payment history, newest first.
"""
from coincrafter.api import api_handler


@api_handler()
def handler(event, services, actor):
    payments = services.payments.list_for(actor.email)
    return {'payments': [p.to_item() for p in payments]}
