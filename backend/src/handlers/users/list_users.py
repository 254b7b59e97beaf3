"""
List Users Handler.
GET /admin/users
"""
from coincrafter.api import api_handler
from coincrafter.models import Role


@api_handler(roles={Role.ADMIN})
def handler(event, services, actor):
    users = services.users.list_users()
    return {'users': [u.to_item() for u in users]}
