"""
List Tasks Handler (admin moderation).
GET /admin/tasks
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.ADMIN})
def handler(event, services, actor):
    tasks = services.tasks.list_all()
    return {'tasks': [t.to_item() for t in tasks]}
