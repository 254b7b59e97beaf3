"""
Shared fixtures: an in-process repository wired into the service container.
"""
import json
from datetime import date, timedelta

import pytest

from coincrafter.app import Services, configure
from coincrafter.memory import InMemoryRepository
from coincrafter.models import Collection, Role, Task, User


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def services(repository):
    services = Services(repository)
    configure(services)
    yield services
    configure(None)


@pytest.fixture
def add_user(repository):
    """Insert a user directly and return its email."""
    def _add_user(email, role=Role.WORKER, coins=0, name=''):
        user = User(email=email, role=role, coins=coins, name=name or email.split('@')[0])
        repository.put(Collection.USERS, user.to_item())
        return email
    return _add_user


@pytest.fixture
def add_task(repository):
    """Insert a task directly (no escrow debit) and return it."""
    def _add_task(created_by, required_workers=3, payable_amount=10, days=7, **fields):
        task = Task(
            title=fields.pop('title', 'Label images'),
            detail=fields.pop('detail', 'Tag every photo'),
            created_by=created_by,
            required_workers=required_workers,
            payable_amount=payable_amount,
            completion_date=date.today() + timedelta(days=days),
            **fields
        )
        repository.put(Collection.TASKS, task.to_item())
        return task
    return _add_task


@pytest.fixture
def coins(repository):
    """Read a user's current balance straight from the store."""
    def _coins(email):
        return repository.get(Collection.USERS, email)['coins']
    return _coins


def make_event(email=None, body=None, path=None, query=None, verified='true'):
    """Build an API Gateway proxy event as the Cognito authorizer passes it."""
    event = {
        'resource': '/test',
        'requestContext': {},
        'pathParameters': path,
        'queryStringParameters': query,
    }
    if email:
        event['requestContext']['authorizer'] = {
            'claims': {'email': email, 'email_verified': verified}
        }
    if body is not None:
        event['body'] = body if isinstance(body, str) else json.dumps(body)
    return event


def response_body(response):
    return json.loads(response['body'])
