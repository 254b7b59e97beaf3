"""
Approve Withdrawal Handler.
PATCH /admin/withdrawals/{withdrawalId}/approve
"""
from coincrafter.api import api_handler, require_path_param
from coincrafter.models import Role


@api_handler(roles={Role.ADMIN})
def handler(event, services, actor):
    withdrawal_id = require_path_param(event, 'withdrawalId')
    return services.withdrawals.approve(withdrawal_id, actor.email)
