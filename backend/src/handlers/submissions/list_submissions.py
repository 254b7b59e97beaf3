"""
List Submissions Handler.
GET /submissions[?status=pending|approved|rejected]

Workers get their own submissions; buyers get the pending ones awaiting
their review.
"""
from coincrafter.api import api_handler
from coincrafter.models import Role
from coincrafter.utils import get_query_param


@api_handler(roles={Role.WORKER, Role.BUYER})
def handler(event, services, actor):
    if actor.role == Role.BUYER:
        submissions = services.submissions.list_pending_for_buyer(actor.email)
    else:
        status = get_query_param(event, 'status')
        submissions = services.submissions.list_for_worker(actor.email, status)
    return {'submissions': [s.to_item() for s in submissions]}
