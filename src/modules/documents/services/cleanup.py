import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session

from modules.documents.models.invitation import Invitation, InvitationStatus

logger = logging.getLogger(__name__)


def expire_overdue_invitations(session: Session, now: Optional[datetime] = None) -> int:
    """Marca como EXPIRED las invitaciones abiertas cuya fecha de expiración pasó."""
    now = now or datetime.utcnow()

    overdue = session.query(Invitation).filter(
        Invitation.status.in_([InvitationStatus.PENDING, InvitationStatus.VIEWED]),
        Invitation.expires_at < now
    ).all()

    for invitation in overdue:
        invitation.status = InvitationStatus.EXPIRED

    session.commit()
    if overdue:
        logger.info("Expired %d overdue invitations", len(overdue))
    return len(overdue)
