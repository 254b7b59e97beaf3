"""
List My Tasks Handler.
GET /buyer/tasks - the caller's tasks, newest first.
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.BUYER})
def handler(event, services, actor):
    tasks = services.tasks.list_mine(actor.email)
    return {'tasks': [t.to_item() for t in tasks]}
