"""
Top Workers Handler.
GET /users/top-workers - public leaderboard: the six richest workers.
"""
from coincrafter.api import api_handler


@api_handler(authenticate=False)
def handler(event, services, actor):
    return {'workers': services.users.top_workers()}
