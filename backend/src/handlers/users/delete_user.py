"""
Delete User Handler.
DELETE /admin/users/{email}
"""
from urllib.parse import unquote

from coincrafter.api import api_handler, require_path_param
from coincrafter.models import Role


@api_handler(roles={Role.ADMIN})
def handler(event, services, actor):
    email = unquote(require_path_param(event, 'email')).strip().lower()
    return {'deleted': services.users.delete_user(email, actor)}
