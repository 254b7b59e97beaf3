"""
Get User Role Handler.
GET /users/role?email=...

Returns only the role, not the full user record.
"""
from coincrafter.api import api_handler
from coincrafter.errors import ValidationError
from coincrafter.utils import get_query_param


@api_handler(authenticate=False)
def handler(event, services, actor):
    email = get_query_param(event, 'email')
    if not email:
        raise ValidationError('Email query is required.')
    return {'role': services.users.get_role(email.strip().lower())}
