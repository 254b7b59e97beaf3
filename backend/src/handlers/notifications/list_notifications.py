"""
List Notifications Handler.
GET /notifications
"""
from coincrafter.api import api_handler


@api_handler()
def handler(event, services, actor):
    notifications = services.notifier.list_for(actor.email)
    return {'notifications': [n.to_item() for n in notifications]}
