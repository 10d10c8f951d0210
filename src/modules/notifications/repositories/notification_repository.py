from typing import List, Dict, Optional
from sqlalchemy.orm import Session

from modules.notifications.models.notification import Notification

class NotificationRepository:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add(self, notification: Notification) -> Notification:
        """Añade sin confirmar; el commit queda en manos del llamador."""
        self.db.add(notification)
        return notification

    def save(self, notification: Notification) -> Notification:
        self.db.add(notification)
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def find_by_user_id(self, user_id: int, unread_only: bool = False) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read.is_(False))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def find_for_user(self, notification_id: int, user_id: int) -> Optional[Notification]:
        return (
            self.db
            .query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    def update(self, notification: Notification, data: Dict) -> Notification:
        for field, value in data.items():
            setattr(notification, field, value)
        self.db.commit()
        self.db.refresh(notification)
        return notification
