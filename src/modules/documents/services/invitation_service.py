import logging
import secrets
from datetime import datetime, timedelta
from typing import Iterable, Optional

from PyPDF2.errors import PdfReadError
from sqlalchemy.orm import Session

from modules.documents.models.document import Document, DocumentStatus
from modules.documents.models.invitation import Invitation, InvitationStatus
from modules.documents.services.exceptions import (
    FinalizationError,
    InvitationError,
    InvitationNotFoundError,
)
from modules.documents.services.finalization_service import FinalizationService
from modules.notifications.repositories.notification_repository import NotificationRepository
from modules.notifications.services.notification_service import (
    DocumentCompletedNotification,
    FinalizationFailedNotification,
    InvitationDeclinedNotification,
    NotificationService,
    SignatureReceivedNotification,
)

logger = logging.getLogger(__name__)

TOKEN_BYTES = 24

INVITABLE_STATES = (DocumentStatus.DRAFT, DocumentStatus.SENT, DocumentStatus.PARTIALLY_SIGNED)
ACTIVE_STATES = (InvitationStatus.PENDING, InvitationStatus.VIEWED, InvitationStatus.COMPLETED)


def generate_signing_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


class InvitationService:

    @staticmethod
    def send_invitations(session: Session, document: Document, signers: Iterable,
                         expires_in_days: int) -> list[Invitation]:
        """
        Crea una invitación por firmante y marca el documento como SENT.

        ``signers`` son objetos con ``email`` y ``name`` opcional. Los emails
        se guardan en minúsculas.
        """
        if document.status not in INVITABLE_STATES:
            raise InvitationError(f"Cannot invite signers to a document in status {document.status.value}")

        signers = list(signers)
        if not signers:
            raise InvitationError("At least one signer is required")

        emails = [s.email.lower() for s in signers]
        if len(set(emails)) != len(emails):
            raise InvitationError("Duplicate signer emails in request")

        already_invited = {
            inv.recipient_email.lower() for inv in document.invitations if inv.status in ACTIVE_STATES
        }
        repeated = sorted(already_invited.intersection(emails))
        if repeated:
            raise InvitationError(f"Already invited: {', '.join(repeated)}")

        expires_at = datetime.utcnow() + timedelta(days=expires_in_days)
        invitations = []
        for signer in signers:
            invitation = Invitation(
                document_id=document.id,
                recipient_email=signer.email.lower(),
                recipient_name=(signer.name or "").strip() or signer.email.split("@")[0],
                status=InvitationStatus.PENDING,
                token=generate_signing_token(),
                expires_at=expires_at,
            )
            session.add(invitation)
            invitations.append(invitation)

        if document.status == DocumentStatus.DRAFT:
            document.status = DocumentStatus.SENT
        session.commit()

        logger.info("Sent %d invitations for document %s", len(invitations), document.id)
        return invitations

    @staticmethod
    def _get_by_token(session: Session, token: str) -> Invitation:
        invitation = session.query(Invitation).filter(Invitation.token == token).first()
        if invitation is None:
            raise InvitationNotFoundError("Invalid signing token")
        return invitation

    @staticmethod
    def _check_open(invitation: Invitation, now: datetime):
        if invitation.status == InvitationStatus.COMPLETED:
            raise InvitationError("Document has already been signed")
        if invitation.status == InvitationStatus.DECLINED:
            raise InvitationError("Invitation was declined")
        if invitation.status == InvitationStatus.EXPIRED or invitation.expires_at < now:
            raise InvitationError("Signing link has expired")
        if invitation.document.status == DocumentStatus.CANCELLED:
            raise InvitationError("Document is no longer available for signing")

    @staticmethod
    def get_invitation_for_signing(session: Session, token: str) -> Invitation:
        """Valida el enlace de firma; la primera visita marca la invitación como VIEWED"""
        invitation = InvitationService._get_by_token(session, token)
        now = datetime.utcnow()
        InvitationService._check_open(invitation, now)

        if invitation.status == InvitationStatus.PENDING:
            invitation.status = InvitationStatus.VIEWED
            invitation.viewed_at = now
            session.commit()
        return invitation

    @staticmethod
    def submit_signature(session: Session, token: str, signer_name: str,
                         signer_title: Optional[str], output_dir: str) -> tuple[Invitation, bool]:
        """
        Registra una firma. Con la última, el documento pasa a COMPLETED y se
        genera el PDF firmado. Devuelve la invitación y si ya están todas
        las firmas.
        """
        signer_name = (signer_name or "").strip()
        if not signer_name:
            raise InvitationError("Signer name is required")

        invitation = InvitationService._get_by_token(session, token)
        now = datetime.utcnow()
        InvitationService._check_open(invitation, now)

        invitation.status = InvitationStatus.COMPLETED
        invitation.signed_at = now
        invitation.viewed_at = invitation.viewed_at or now
        invitation.signer_name = signer_name
        invitation.signer_title = (signer_title or "").strip() or None

        document = invitation.document
        session.flush()
        status = FinalizationService.get_finalization_status(session, document.id)
        document.status = DocumentStatus.COMPLETED if status.is_ready else DocumentStatus.PARTIALLY_SIGNED

        notifications = NotificationService(NotificationRepository(session))
        notifications.notify(SignatureReceivedNotification(
            user_id=document.created_by_id,
            document_id=document.id,
            document_title=document.title,
            signer_name=signer_name,
            completed=status.completed_signatures,
            total=status.total_signatures,
        ), commit=False)
        session.commit()
        logger.info("Invitation %s signed (%d/%d) for document %s", invitation.id,
                    status.completed_signatures, status.total_signatures, document.id)

        if status.is_ready:
            try:
                FinalizationService.finalize_document(session, document.id, output_dir)
            except (FinalizationError, PdfReadError, OSError):
                # la firma queda registrada; el propietario puede reintentar /finalize
                logger.exception("Automatic finalization failed for document %s", document.id)
                session.rollback()
                notifications.notify(FinalizationFailedNotification(
                    user_id=document.created_by_id,
                    document_id=document.id,
                    document_title=document.title,
                ))
            else:
                notifications.notify(DocumentCompletedNotification(
                    user_id=document.created_by_id,
                    document_id=document.id,
                    document_title=document.title,
                ))

        return invitation, status.is_ready

    @staticmethod
    def decline_invitation(session: Session, token: str) -> Invitation:
        invitation = InvitationService._get_by_token(session, token)
        InvitationService._check_open(invitation, datetime.utcnow())

        invitation.status = InvitationStatus.DECLINED
        document = invitation.document
        NotificationService(NotificationRepository(session)).notify(InvitationDeclinedNotification(
            user_id=document.created_by_id,
            document_id=document.id,
            document_title=document.title,
            recipient_email=invitation.recipient_email,
        ), commit=False)
        session.commit()

        logger.info("Invitation %s declined for document %s", invitation.id, document.id)
        return invitation

