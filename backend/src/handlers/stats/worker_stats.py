"""
Worker Stats Handler.
GET /worker/stats
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.WORKER})
def handler(event, services, actor):
    return services.stats.worker(actor.email)
