"""
List Available Tasks Handler.
GET /worker/tasks

Returns tasks that still accept workers (required_workers > 0),
soonest completion_date first.
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.WORKER})
def handler(event, services, actor):
    tasks = services.tasks.list_available()
    return {
        'tasks': [t.to_item() for t in tasks],
        'totalTasks': len(tasks)
    }
