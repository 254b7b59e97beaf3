"""
Review Submission Handler.
PATCH /buyer/submissions/{submissionId}
Body: { "status": "approved" | "rejected" }

Approval credits the worker; rejection returns the slot to the task.
A submission that is no longer pending cannot be reviewed again.
"""
from coincrafter.api import api_handler, read_body, require_path_param
from coincrafter.models import Role
from coincrafter.schemas import ReviewSubmissionRequest


@api_handler(roles={Role.BUYER})
def handler(event, services, actor):
    submission_id = require_path_param(event, 'submissionId')
    request = read_body(event, ReviewSubmissionRequest)
    submission = services.submissions.review(submission_id, actor.email, request.status)
    return {
        'success': True,
        'submissionId': submission.submission_id,
        'status': submission.status
    }
