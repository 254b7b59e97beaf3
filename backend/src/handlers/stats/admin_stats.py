"""
Admin Stats Handler.
GET /admin/stats
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.ADMIN})
def handler(event, services, actor):
    return services.stats.admin()
