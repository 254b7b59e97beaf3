"""
Delete Task Handler.
DELETE /tasks/{taskId}

Owner or admin. Unclaimed escrow goes back to the task's creator unless the
task is completed.
"""
from coincrafter.api import api_handler, require_path_param
from coincrafter.models import Role


@api_handler(roles={Role.BUYER, Role.ADMIN})
def handler(event, services, actor):
    task_id = require_path_param(event, 'taskId')
    return services.tasks.delete(task_id, actor)
