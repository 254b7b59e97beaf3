"""
Get Task Handler.
GET /tasks/{taskId}
"""
from coincrafter.api import api_handler, require_path_param


@api_handler()
def handler(event, services, actor):
    task = services.tasks.get(require_path_param(event, 'taskId'))
    return {'task': task.to_item()}
