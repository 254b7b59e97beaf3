"""
Get Wallet Handler - current coin balance.
GET /wallet[?email=...]

Defaults to the caller; admins may read any account.
"""
from coincrafter.api import api_handler
from coincrafter.utils import get_query_param


@api_handler()
def handler(event, services, actor):
    email = (get_query_param(event, 'email') or actor.email).strip().lower()
    coins = services.users.get_balance(email, actor)
    return {'email': email, 'coins': coins}
