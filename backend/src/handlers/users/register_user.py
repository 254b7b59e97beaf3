"""
Register User Handler.
POST /users
Body: { "name": "...", "photo": "...", "role": "worker" | "buyer" }

The account email is the verified email from the identity provider, never
the body. New accounts start with the role's sign-up bonus.
"""
from coincrafter.api import api_handler, read_body
from coincrafter.schemas import RegisterUserRequest


@api_handler(authenticate=False, status=201)
def handler(event, services, actor):
    email = services.identity.identify(event)
    request = read_body(event, RegisterUserRequest)
    user = services.users.register(email, request)
    return {'user': user.to_item()}
