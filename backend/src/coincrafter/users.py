"""
User accounts: sign-up, role lookup, balance, admin moderation.
"""
from typing import List

from .auth import Actor
from .config import config
from .errors import Conflict, Forbidden, NotFound, ValidationError
from .ledger import CoinLedger
from .logging import logger
from .models import Collection, Role, User
from .operations import Delete, Update
from .repository import Repository
from .schemas import RegisterUserRequest

SIGNUP_COINS = {
    Role.WORKER: config.WORKER_SIGNUP_COINS,
    Role.BUYER: config.BUYER_SIGNUP_COINS,
}


class UserService:

    def __init__(self, repository: Repository, ledger: CoinLedger):
        self.repository = repository
        self.ledger = ledger

    def register(self, email: str, request: RegisterUserRequest) -> User:
        """Create the account for a verified email, with the role's sign-up bonus."""
        user = User(
            email=email,
            name=request.name,
            photo=request.photo,
            role=request.role,
            coins=SIGNUP_COINS.get(request.role, 0),
        )
        try:
            self.repository.put(Collection.USERS, user.to_item())
        except Conflict:
            raise Conflict('User already exists.')
        logger.info(f"Registered {request.role} {email} with {user.coins} coins")
        return user

    def get(self, email: str) -> User:
        item = self.repository.get(Collection.USERS, email)
        if not item:
            raise NotFound('User not found.')
        return User.from_item(item)

    def get_role(self, email: str) -> str:
        return self.get(email).role or Role.WORKER

    def get_balance(self, email: str, actor: Actor) -> int:
        if actor.email != email and actor.role != Role.ADMIN:
            raise Forbidden('You can only read your own balance')
        return self.ledger.balance(email)

    def list_users(self) -> List[User]:
        users = [User.from_item(item) for item in self.repository.find(Collection.USERS)]
        users.sort(key=lambda u: u.created_at)
        return users

    def set_role(self, email: str, role: str) -> int:
        if role not in Role.ALL:
            raise ValidationError(f'Unknown role {role}')
        self.repository.apply([Update(Collection.USERS, email, values={'role': role})])
        logger.info(f"Role of {email} set to {role}")
        return 1

    def delete_user(self, email: str, actor: Actor) -> int:
        if email == actor.email:
            raise ValidationError('Admins cannot delete their own account')
        self.repository.apply([Delete(Collection.USERS, email)])
        logger.info(f"User {email} deleted by {actor.email}")
        return 1

    def top_workers(self, limit: int = None) -> List[dict]:
        limit = limit or config.TOP_WORKERS_LIMIT
        workers = [User.from_item(item) for item in self.repository.find(Collection.USERS, role=Role.WORKER)]
        workers.sort(key=lambda u: u.coins, reverse=True)
        return [
            {'name': w.name, 'photo': w.photo, 'coins': w.coins}
            for w in workers[:limit]
        ]
