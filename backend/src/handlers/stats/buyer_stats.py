"""
Buyer Stats Handler.
GET /buyer/stats
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.BUYER})
def handler(event, services, actor):
    return services.stats.buyer(actor.email)
