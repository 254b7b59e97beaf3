"""
Create Task Handler.
POST /buyer/tasks

Debits required_workers * payable_amount from the buyer and stores the task.
"""
from coincrafter.api import api_handler, read_body
from coincrafter.models import Role
from coincrafter.schemas import CreateTaskRequest


@api_handler(roles={Role.BUYER}, status=201)
def handler(event, services, actor):
    """
    Body: {
        "title": "...", "detail": "...",
        "required_workers": 5, "payable_amount": 10,
        "completion_date": "2026-12-31",
        "submission_info": "...", "image_url": "..."
    }
    """
    request = read_body(event, CreateTaskRequest)
    task = services.tasks.create(actor.email, request)
    return {
        'message': 'Task created',
        'taskId': task.task_id,
        'cost': task.escrow
    }
