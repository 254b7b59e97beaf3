"""
Notification sink.
Append-only records keyed by recipient; clients poll for them.
"""
from typing import List

from .logging import logger
from .models import Collection, Notification, Role
from .repository import Repository


class Notifier:
    """Fire-and-forget notification inserts."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def notify(self, message: str, to_email: str, action_route: str = '') -> None:
        notification = Notification(message=message, to_email=to_email, action_route=action_route)
        try:
            self.repository.put(Collection.NOTIFICATIONS, notification.to_item())
        except Exception as e:
            # Delivery never undoes the transition that produced it
            logger.warning(f"Notification to {to_email} not stored (non-critical): {e}")

    def notify_admins(self, message: str, action_route: str = '') -> None:
        try:
            admins = self.repository.find(Collection.USERS, role=Role.ADMIN)
        except Exception as e:
            logger.warning(f"Could not look up admins for notification (non-critical): {e}")
            return
        for admin in admins:
            self.notify(message, admin['email'], action_route)

    def list_for(self, email: str) -> List[Notification]:
        items = self.repository.find(Collection.NOTIFICATIONS, toEmail=email)
        notifications = [Notification.from_item(item) for item in items]
        notifications.sort(key=lambda n: n.time, reverse=True)
        return notifications
