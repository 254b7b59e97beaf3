"""
Identity gate.

Credentials are verified upstream by the API Gateway authorizer (Cognito);
the Lambda only reads the verified claims, resolves the email to a user
record and checks the role it needs.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import Forbidden, Unauthorized
from .models import Collection, Role
from .repository import Repository


@dataclass(frozen=True)
class Actor:
    """The authenticated caller."""
    email: str
    role: str
    name: str = ''


def get_claims(event: dict) -> dict:
    """
    Extract verified claims from the authorizer context.
    REST APIs put them under `claims`, HTTP APIs under `jwt.claims`.
    """
    try:
        authorizer = event['requestContext']['authorizer']
    except (KeyError, TypeError):
        return {}
    if not isinstance(authorizer, dict):
        return {}
    claims = authorizer.get('claims')
    if claims is None:
        claims = (authorizer.get('jwt') or {}).get('claims')
    return claims or {}


def get_user_email(event: dict) -> Optional[str]:
    """Extract the verified email from the claims."""
    claims = get_claims(event)
    email = claims.get('email')
    if not email:
        return None
    if str(claims.get('email_verified', 'true')).lower() == 'false':
        return None
    return email.strip().lower()


def authorize(actor: Actor, roles: Iterable[str]) -> None:
    """Single role check used by every handler that restricts its caller."""
    roles = set(roles)
    if actor.role not in roles:
        raise Forbidden(f"Requires role {' or '.join(sorted(roles))}")


class IdentityGate:
    """Resolves an API Gateway event to an Actor."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def identify(self, event: dict) -> str:
        """Return the verified email; the caller may not have an account yet."""
        email = get_user_email(event)
        if not email:
            raise Unauthorized('Missing or invalid credentials')
        return email

    def authenticate(self, event: dict) -> Actor:
        email = self.identify(event)
        user = self.repository.get(Collection.USERS, email)
        if not user:
            raise Unauthorized('No account for these credentials')
        return Actor(email=user['email'], role=user.get('role', Role.WORKER), name=user.get('name', ''))
