"""
Withdraw Funds Handler - request a cash-out.
POST /worker/withdrawals
Body: { "withdrawal_coin": 200, "payment_system": "paypal", "account_number": "..." }

The request is only recorded here; coins are debited when an admin approves it.
"""
from coincrafter.api import api_handler, read_body
from coincrafter.models import Role
from coincrafter.schemas import WithdrawalRequest


@api_handler(roles={Role.WORKER}, status=201)
def handler(event, services, actor):
    request = read_body(event, WithdrawalRequest)
    withdrawal = services.withdrawals.request(actor, request)
    return {
        'message': 'Withdrawal requested',
        'withdrawalId': withdrawal.withdrawal_id,
        'withdrawalAmount': withdrawal.withdrawal_amount
    }
