# modules/notifications/services/notification_service.py
from typing import List, Optional

from modules.notifications.models.notification import Notification
from modules.notifications.repositories.notification_repository import NotificationRepository

class NotificationTemplate:
    def __init__(self, user_id: int, title: str, message: str, document_id: Optional[str] = None):
        self.user_id = user_id
        self.title = title
        self.message = message
        self.document_id = document_id

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'title': self.title,
            'message': self.message,
            'document_id': self.document_id,
        }

class SignatureReceivedNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_id: str, document_title: str,
                 signer_name: str, completed: int, total: int):
        title = "Signature received"
        message = (
            f"{signer_name} signed '{document_title}' "
            f"({completed} of {total} signatures collected)."
        )
        super().__init__(user_id, title, message, document_id)

class DocumentCompletedNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_id: str, document_title: str):
        title = "Document completed"
        message = f"All recipients have signed '{document_title}'. The signed copy is ready to download."
        super().__init__(user_id, title, message, document_id)

class FinalizationFailedNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_id: str, document_title: str):
        title = "Finalization failed"
        message = (
            f"All recipients have signed '{document_title}', but the signed copy could not be generated. "
            f"Retry from the finalize action."
        )
        super().__init__(user_id, title, message, document_id)

class InvitationDeclinedNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_id: str, document_title: str, recipient_email: str):
        title = "Invitation declined"
        message = f"{recipient_email} declined to sign '{document_title}'."
        super().__init__(user_id, title, message, document_id)

class NotificationService:
    def __init__(self, repository: NotificationRepository):
        self.notification_repository = repository

    def notify(self, template: NotificationTemplate, commit: bool = True) -> Notification:
        notif = Notification(**template.to_dict())
        if commit:
            return self.notification_repository.save(notif)
        return self.notification_repository.add(notif)

    def get_notifications(self, user_id: int, unread_only: bool = False) -> List[Notification]:
        return self.notification_repository.find_by_user_id(user_id, unread_only)

    def mark_as_read(self, notification_id: int, user_id: int) -> Optional[Notification]:
        notif = self.notification_repository.find_for_user(notification_id, user_id)
        if not notif:
            return None
        return self.notification_repository.update(notif, {'read': True})
