"""
Task lifecycle: create (escrow debit), update, delete (refund), listings.
"""
from typing import List

from .auth import Actor
from .errors import Forbidden, NotFound, UserNotFound
from .ledger import CoinLedger
from .logging import logger
from .models import Collection, Role, Task, TaskStatus
from .notifications import Notifier
from .operations import Delete, Put, Update
from .repository import Repository
from .schemas import CreateTaskRequest, UpdateTaskRequest


class TaskService:

    def __init__(self, repository: Repository, ledger: CoinLedger, notifier: Notifier):
        self.repository = repository
        self.ledger = ledger
        self.notifier = notifier

    def get(self, task_id: str) -> Task:
        item = self.repository.get(Collection.TASKS, task_id)
        if not item:
            raise NotFound(f'Task {task_id} not found')
        return Task.from_item(item)

    def create(self, buyer_email: str, request: CreateTaskRequest) -> Task:
        """
        Debit the buyer by required_workers * payable_amount and insert the task.

        Both writes commit together: on InsufficientBalance or UserNotFound no
        task is stored and no coins move.
        """
        task = Task(
            title=request.title,
            detail=request.detail,
            submission_info=request.submission_info,
            image_url=request.image_url,
            created_by=buyer_email,
            required_workers=request.required_workers,
            payable_amount=request.payable_amount,
            completion_date=request.completion_date,
        )
        cost = task.escrow

        self.ledger.commit(
            [self.ledger.debit_entry(buyer_email, cost)],
            effects=[Put(Collection.TASKS, item=task.to_item())]
        )
        logger.info(f"Task {task.task_id} created by {buyer_email}, {cost} coins in escrow")
        return task

    def update(self, task_id: str, requester_email: str, request: UpdateTaskRequest) -> int:
        task = self.get(task_id)
        if task.created_by != requester_email:
            raise Forbidden('Only the task owner can update it')

        self.repository.apply([
            Update(
                Collection.TASKS, task_id,
                values=request.changes(),
                expected={'created_by': requester_email}
            )
        ])
        return 1

    def delete(self, task_id: str, actor: Actor) -> dict:
        """
        Delete a task, refunding the unclaimed escrow to its creator unless the
        task is completed. The delete only commits if capacity and status are
        still what the refund was computed from.
        """
        task = self.get(task_id)
        if actor.role != Role.ADMIN and task.created_by != actor.email:
            raise Forbidden('Only the task owner or an admin can delete it')

        refund = task.escrow if task.status != TaskStatus.COMPLETED else 0
        removal = Delete(
            Collection.TASKS, task_id,
            expected={'required_workers': task.required_workers, 'status': task.status}
        )

        if refund > 0:
            try:
                self.ledger.commit([self.ledger.credit_entry(task.created_by, refund)], effects=[removal])
            except UserNotFound:
                logger.warning(f"Creator {task.created_by} of task {task_id} no longer exists, deleting without refund")
                self.repository.apply([removal])
                refund = 0
        else:
            self.repository.apply([removal])

        logger.info(f"Task {task_id} deleted by {actor.email}, refunded {refund} coins")

        if refund > 0:
            self.notifier.notify(
                f'Your task "{task.title}" was deleted and {refund} coins were refunded',
                task.created_by,
                '/dashboard/my-tasks'
            )

        return {'deleted': True, 'refillAmount': refund}

    def list_available(self) -> List[Task]:
        """Tasks that still accept workers, soonest deadline first."""
        tasks = [
            Task.from_item(item)
            for item in self.repository.find(Collection.TASKS)
        ]
        available = [t for t in tasks if t.required_workers > 0]
        available.sort(key=lambda t: (t.completion_date, t.created_at))
        return available

    def list_mine(self, buyer_email: str) -> List[Task]:
        """Tasks created by the buyer, most recent first."""
        tasks = [
            Task.from_item(item)
            for item in self.repository.find(Collection.TASKS, created_by=buyer_email)
        ]
        tasks.sort(key=lambda t: t.created_at, reverse=True)
        return tasks

    def list_all(self) -> List[Task]:
        tasks = [Task.from_item(item) for item in self.repository.find(Collection.TASKS)]
        tasks.sort(key=lambda t: t.created_at, reverse=True)
        return tasks
