"""
Update Task Handler.
PATCH /buyer/tasks/{taskId}
"""
from coincrafter.api import api_handler, read_body, require_path_param
from coincrafter.models import Role
from coincrafter.schemas import UpdateTaskRequest


@api_handler(roles={Role.BUYER})
def handler(event, services, actor):
    task_id = require_path_param(event, 'taskId')
    request = read_body(event, UpdateTaskRequest)
    updated = services.tasks.update(task_id, actor.email, request)
    return {'updated': updated}
