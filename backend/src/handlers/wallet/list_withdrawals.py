"""
List Withdrawals Handler.
GET /withdrawals - pending requests for admins, own history for workers.
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.ADMIN, Role.WORKER})
def handler(event, services, actor):
    if actor.role == Role.ADMIN:
        withdrawals = services.withdrawals.list_pending()
    else:
        withdrawals = services.withdrawals.list_for_worker(actor.email)
    return {'withdrawals': [w.to_item() for w in withdrawals]}
