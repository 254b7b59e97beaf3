"""
Submission lifecycle.

    pending -> approved   credits the worker payable_amount
    pending -> rejected   frees one slot of the parent task, or refunds the
                          buyer the slot's escrow once the task is gone

Both moves are compare-and-swap on status inside the same atomic unit as
their side effect, so a submission is paid at most once no matter how many
approvals race for it.
"""
from typing import List, Optional

from .auth import Actor
from .errors import Forbidden, NotFound, UserNotFound, ValidationError
from .ledger import CoinLedger
from .logging import logger
from .models import Collection, Submission, SubmissionStatus, Task, check_transition
from .notifications import Notifier
from .operations import Increment, Put, Transition
from .repository import Repository
from .schemas import SubmitWorkRequest


class SubmissionService:

    def __init__(self, repository: Repository, ledger: CoinLedger, notifier: Notifier):
        self.repository = repository
        self.ledger = ledger
        self.notifier = notifier

    def get(self, submission_id: str) -> Submission:
        item = self.repository.get(Collection.SUBMISSIONS, submission_id)
        if not item:
            raise NotFound(f'Submission {submission_id} not found')
        return Submission.from_item(item)

    def submit(self, worker: Actor, request: SubmitWorkRequest) -> Submission:
        """Claim one slot of the task and record the pending submission."""
        item = self.repository.get(Collection.TASKS, request.task_id)
        if not item:
            raise ValidationError(f'Invalid task_id {request.task_id}')
        task = Task.from_item(item)
        if task.required_workers <= 0:
            raise ValidationError('This task is no longer accepting submissions')

        submission = Submission(
            task_id=task.task_id,
            task_title=task.title,
            worker_email=worker.email,
            worker_name=worker.name,
            buyer_email=task.created_by,
            payable_amount=task.payable_amount,
            submission_details=request.submission_details,
        )

        self.repository.apply([
            Increment(Collection.TASKS, task.task_id, attribute='required_workers', delta=-1, at_least=1),
            Put(Collection.SUBMISSIONS, item=submission.to_item()),
        ])
        logger.info(f"Submission {submission.submission_id} for task {task.task_id} by {worker.email}")

        self.notifier.notify(
            f'{worker.name or worker.email} submitted work for "{task.title}"',
            task.created_by,
            '/dashboard/buyer-home'
        )
        return submission

    def _owned_submission(self, submission_id: str, buyer_email: str):
        """Load a submission and its task, checking the buyer owns both."""
        submission = self.get(submission_id)
        if submission.buyer_email != buyer_email:
            raise Forbidden('Only the buyer who owns the task can review this submission')

        task_item = self.repository.get(Collection.TASKS, submission.task_id)
        task = Task.from_item(task_item) if task_item else None
        if task is not None and task.created_by != buyer_email:
            raise Forbidden('Only the buyer who owns the task can review this submission')
        return submission, task

    def approve(self, submission_id: str, buyer_email: str) -> Submission:
        submission, task = self._owned_submission(submission_id, buyer_email)
        check_transition(Collection.SUBMISSIONS, submission.status, SubmissionStatus.APPROVED)

        self.ledger.commit(
            [self.ledger.credit_entry(submission.worker_email, submission.payable_amount)],
            effects=[
                Transition(
                    Collection.SUBMISSIONS, submission_id,
                    current=SubmissionStatus.PENDING,
                    target=SubmissionStatus.APPROVED
                )
            ]
        )
        submission.status = SubmissionStatus.APPROVED
        logger.info(f"Submission {submission_id} approved, {submission.payable_amount} coins to {submission.worker_email}")

        self.notifier.notify(
            f'You have earned {submission.payable_amount} coins from {buyer_email} '
            f'for completing "{submission.task_title}"',
            submission.worker_email,
            '/dashboard/worker-home'
        )
        self.notifier.notify_admins(
            f'{buyer_email} approved {submission.worker_email} on "{submission.task_title}" '
            f'({submission.payable_amount} coins paid)',
            '/dashboard/admin-home'
        )
        self.notifier.notify(
            f'You approved {submission.worker_email} on "{submission.task_title}"',
            buyer_email,
            '/dashboard/buyer-home'
        )
        return submission

    def reject(self, submission_id: str, buyer_email: str) -> Submission:
        """
        Reject a pending submission and release its claimed slot.

        While the task exists the slot goes back to it. Once the task is
        deleted its deletion refund no longer covers this slot, so the slot's
        payable_amount goes back to the buyer in the same unit instead.
        """
        submission, task = self._owned_submission(submission_id, buyer_email)
        check_transition(Collection.SUBMISSIONS, submission.status, SubmissionStatus.REJECTED)

        transition = Transition(
            Collection.SUBMISSIONS, submission_id,
            current=SubmissionStatus.PENDING,
            target=SubmissionStatus.REJECTED
        )
        if task is not None:
            self.repository.apply([
                transition,
                Increment(Collection.TASKS, task.task_id, attribute='required_workers', delta=1),
            ])
            logger.info(f"Submission {submission_id} rejected, slot returned to task {submission.task_id}")
        else:
            try:
                self.ledger.commit(
                    [self.ledger.credit_entry(submission.buyer_email, submission.payable_amount)],
                    effects=[transition]
                )
            except UserNotFound:
                logger.warning(f"Buyer {submission.buyer_email} no longer exists, rejecting {submission_id} without refund")
                self.repository.apply([transition])
            else:
                logger.info(
                    f"Submission {submission_id} rejected after task {submission.task_id} was deleted, "
                    f"{submission.payable_amount} coins back to {submission.buyer_email}"
                )
        submission.status = SubmissionStatus.REJECTED

        self.notifier.notify(
            f'Your submission for "{submission.task_title}" was rejected by {buyer_email}',
            submission.worker_email,
            '/dashboard/worker-home'
        )
        self.notifier.notify_admins(
            f'{buyer_email} rejected {submission.worker_email} on "{submission.task_title}"',
            '/dashboard/admin-home'
        )
        self.notifier.notify(
            f'You rejected {submission.worker_email} on "{submission.task_title}"',
            buyer_email,
            '/dashboard/buyer-home'
        )
        return submission

    def review(self, submission_id: str, buyer_email: str, status: str) -> Submission:
        if status == SubmissionStatus.APPROVED:
            return self.approve(submission_id, buyer_email)
        if status == SubmissionStatus.REJECTED:
            return self.reject(submission_id, buyer_email)
        raise ValidationError(f'Unsupported review status {status}')

    def list_for_worker(self, worker_email: str, status: Optional[str] = None) -> List[Submission]:
        filters = {'worker_email': worker_email}
        if status:
            filters['status'] = status
        submissions = [
            Submission.from_item(item)
            for item in self.repository.find(Collection.SUBMISSIONS, **filters)
        ]
        submissions.sort(key=lambda s: s.submitted_at, reverse=True)
        return submissions

    def list_pending_for_buyer(self, buyer_email: str) -> List[Submission]:
        submissions = [
            Submission.from_item(item)
            for item in self.repository.find(
                Collection.SUBMISSIONS, buyer_email=buyer_email, status=SubmissionStatus.PENDING
            )
        ]
        submissions.sort(key=lambda s: s.submitted_at)
        return submissions
