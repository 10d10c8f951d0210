# modules/notifications/controllers/notification_controller.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from database import get_db
from modules.auth.dependencies import get_current_user
from modules.documents.models.user import User
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.notifications.services.notification_service import NotificationService
from modules.notifications.models.schemas import NotificationResponse

router = APIRouter()


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    repo = NotificationRepository(db)
    return NotificationService(repo)


@router.get(
    "",
    response_model=List[NotificationResponse],
    summary="Notificaciones del usuario autenticado"
)
def list_notifications(
    unread_only: bool = False,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    return service.get_notifications(current_user.id, unread_only)


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Marcar notificación como leída"
)
def mark_notification_as_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    notif = service.mark_as_read(notification_id, current_user.id)
    if not notif:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found"
        )
    return notif
