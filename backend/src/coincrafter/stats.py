"""
Read-only dashboard aggregates.
"""
from decimal import Decimal

from .models import Collection, Payment, Role, Submission, SubmissionStatus, Task, User
from .repository import Repository


class StatsService:

    def __init__(self, repository: Repository):
        self.repository = repository

    def buyer(self, buyer_email: str) -> dict:
        tasks = [Task.from_item(i) for i in self.repository.find(Collection.TASKS, created_by=buyer_email)]
        approved = [
            Submission.from_item(i)
            for i in self.repository.find(
                Collection.SUBMISSIONS, buyer_email=buyer_email, status=SubmissionStatus.APPROVED
            )
        ]
        return {
            'totalTasks': len(tasks),
            'pendingWorkers': sum(t.required_workers for t in tasks),
            'totalPaid': sum(s.payable_amount for s in approved),
        }

    def worker(self, worker_email: str) -> dict:
        submissions = [
            Submission.from_item(i)
            for i in self.repository.find(Collection.SUBMISSIONS, worker_email=worker_email)
        ]
        by_status = {
            SubmissionStatus.PENDING: 0,
            SubmissionStatus.APPROVED: 0,
            SubmissionStatus.REJECTED: 0,
        }
        for s in submissions:
            by_status[s.status] = by_status.get(s.status, 0) + 1

        return {
            'totalSubmissions': len(submissions),
            'pendingSubmissions': by_status[SubmissionStatus.PENDING],
            'approvedSubmissions': by_status[SubmissionStatus.APPROVED],
            'rejectedSubmissions': by_status[SubmissionStatus.REJECTED],
            'totalEarnings': sum(
                s.payable_amount for s in submissions if s.status == SubmissionStatus.APPROVED
            ),
        }

    def admin(self) -> dict:
        users = [User.from_item(i) for i in self.repository.find(Collection.USERS)]
        payments = [Payment.from_item(i) for i in self.repository.find(Collection.PAYMENTS)]
        return {
            'totalWorkers': sum(1 for u in users if u.role == Role.WORKER),
            'totalBuyers': sum(1 for u in users if u.role == Role.BUYER),
            'totalAdmins': sum(1 for u in users if u.role == Role.ADMIN),
            'totalCoins': sum(u.coins for u in users),
            'totalPayments': sum((p.amount for p in payments), Decimal('0')),
        }
