"""
Submit Work Handler.
POST /worker/submissions
Body: { "task_id": "...", "submission_details": "..." }

Claims one slot of the task; no coins move until the buyer approves.
"""
from coincrafter.api import api_handler, read_body
from coincrafter.models import Role
from coincrafter.schemas import SubmitWorkRequest


@api_handler(roles={Role.WORKER}, status=201)
def handler(event, services, actor):
    request = read_body(event, SubmitWorkRequest)
    submission = services.submissions.submit(actor, request)
    return {
        'message': 'Work submitted successfully',
        'submissionId': submission.submission_id
    }
