"""
Update User Role Handler.
PATCH /admin/users/{email}/role
Body: { "role": "buyer" | "worker" | "admin" }
"""
from urllib.parse import unquote

from coincrafter.api import api_handler, read_body, require_path_param
from coincrafter.models import Role
from coincrafter.schemas import UpdateRoleRequest


@api_handler(roles={Role.ADMIN})
def handler(event, services, actor):
    email = unquote(require_path_param(event, 'email')).strip().lower()
    request = read_body(event, UpdateRoleRequest)
    return {'updated': services.users.set_role(email, request.role)}
