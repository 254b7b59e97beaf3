"""
Data models and status constants for the Coin Crafter platform.

Each record model maps to one collection (a DynamoDB table). Attribute names
are the stored names, so `to_item()` output is what lands in the table.
"""
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidTransition


class Role:
    """User roles."""
    BUYER = 'buyer'
    WORKER = 'worker'
    ADMIN = 'admin'

    ALL = (BUYER, WORKER, ADMIN)


class TaskStatus:
    """
    Task statuses.

    No request operation moves a task to COMPLETED. It is set out of band by
    an operator on the stored record once the buyer's job is closed, and it
    only changes deletion: a completed task refunds nothing.
    """
    PENDING = 'pending'
    COMPLETED = 'completed'


class SubmissionStatus:
    """Submission review statuses."""
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


class WithdrawalStatus:
    """Withdrawal statuses."""
    PENDING = 'pending'
    APPROVED = 'approved'


class Collection:
    """Logical collection names used by the repository layer."""
    USERS = 'users'
    TASKS = 'tasks'
    SUBMISSIONS = 'submissions'
    PAYMENTS = 'payments'
    WITHDRAWALS = 'withdrawals'
    NOTIFICATIONS = 'notifications'


# Key attribute of each collection
KEYS = {
    Collection.USERS: 'email',
    Collection.TASKS: 'taskId',
    Collection.SUBMISSIONS: 'submissionId',
    Collection.PAYMENTS: 'transactionId',
    Collection.WITHDRAWALS: 'withdrawalId',
    Collection.NOTIFICATIONS: 'notificationId',
}

# Legal status moves per collection. Anything absent is illegal.
TRANSITIONS = {
    Collection.SUBMISSIONS: {
        SubmissionStatus.PENDING: {SubmissionStatus.APPROVED, SubmissionStatus.REJECTED},
    },
    Collection.WITHDRAWALS: {
        WithdrawalStatus.PENDING: {WithdrawalStatus.APPROVED},
    },
}


def check_transition(collection: str, current: str, target: str) -> None:
    """Raise InvalidTransition unless `current -> target` is a legal move."""
    allowed = TRANSITIONS.get(collection, {}).get(current, set())
    if target not in allowed:
        raise InvalidTransition(
            f'Cannot move {collection[:-1]} from {current} to {target}'
        )


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class Record(BaseModel):
    """Base for stored records."""

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_item(cls, item: dict):
        return cls.model_validate(item)

    def to_item(self) -> dict:
        """Dump with stored attribute names, dates as ISO strings."""
        item = self.model_dump(by_alias=True, exclude_none=True)
        for name, value in item.items():
            if isinstance(value, (date, datetime)):
                item[name] = value.isoformat()
        return item


class User(Record):
    """
    Users collection.
    Key: email
    """
    email: str
    name: str = ''
    photo: Optional[str] = None
    role: str = Role.WORKER
    coins: int = Field(0, ge=0)
    created_at: str = Field(default_factory=utc_now)


class Task(Record):
    """
    Tasks posted by buyers.
    Key: taskId
    """
    task_id: str = Field(default_factory=new_id, alias='taskId')
    title: str
    detail: str = ''
    submission_info: str = ''
    image_url: Optional[str] = None
    created_by: str
    required_workers: int = Field(ge=0)
    payable_amount: int = Field(ge=0)
    completion_date: date
    status: str = TaskStatus.PENDING
    created_at: str = Field(default_factory=utc_now)

    @property
    def escrow(self) -> int:
        """Coins still held for the unclaimed slots."""
        return self.required_workers * self.payable_amount


class Submission(Record):
    """
    Work submitted by a worker against a task.
    Key: submissionId
    """
    submission_id: str = Field(default_factory=new_id, alias='submissionId')
    task_id: str
    task_title: str = ''
    worker_email: str
    worker_name: str = ''
    buyer_email: str
    payable_amount: int = Field(ge=0)
    submission_details: str
    submitted_at: str = Field(default_factory=utc_now, alias='submittedAt')
    status: str = SubmissionStatus.PENDING


class Payment(Record):
    """
    Completed external charge. Immutable.
    Key: transactionId
    """
    transaction_id: str = Field(alias='transactionId')
    email: str
    amount: Decimal
    coins: int = Field(gt=0)
    date: str = Field(default_factory=utc_now)


class Withdrawal(Record):
    """
    Worker cash-out request.
    Key: withdrawalId
    """
    withdrawal_id: str = Field(default_factory=new_id, alias='withdrawalId')
    worker_email: str
    worker_name: str = ''
    withdrawal_coin: int = Field(gt=0)
    withdrawal_amount: Decimal = Decimal('0')
    payment_system: Optional[str] = None
    account_number: Optional[str] = None
    status: str = WithdrawalStatus.PENDING
    requested_at: str = Field(default_factory=utc_now, alias='requestedAt')
    approved_at: Optional[str] = Field(None, alias='approvedAt')


class Notification(Record):
    """
    Append-only event log entry.
    Key: notificationId
    """
    notification_id: str = Field(default_factory=new_id, alias='notificationId')
    message: str
    to_email: str = Field(alias='toEmail')
    action_route: str = Field('', alias='actionRoute')
    time: str = Field(default_factory=utc_now)
