from datetime import datetime, timezone
from typing import Optional

from modules.documents.models.document import Document
from modules.documents.models.invitation import InvitationStatus
from modules.documents.schemas import (
    CompletionMetrics,
    CompletionStatusResponse,
    DocumentSummary,
    FinalizationStatusPayload,
    InvitationEntry,
    OwnerSummary,
    SignatureEntry,
)
from modules.documents.services.finalization_service import FinalizationStatus


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 con offset UTC explícito; las fechas se guardan en UTC sin zona"""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def progress_percentage(completed: int, total: int) -> int:
    """Porcentaje entero de completed/total, redondeando .5 hacia arriba. 0 si total es 0"""
    if total <= 0:
        return 0
    completed = max(0, min(completed, total))
    return (completed * 200 + total) // (2 * total)


def build_completion_status(document: Document, status: FinalizationStatus) -> CompletionStatusResponse:
    """
    Combina el documento (con invitaciones y creador cargados) y su estado
    de finalización en la respuesta de completion-status. Sin E/S.
    """
    signed = [
        inv for inv in document.invitations
        if inv.status == InvitationStatus.COMPLETED and inv.signed_at is not None
    ]
    signed.sort(key=lambda inv: inv.signed_at)

    signatures = [
        SignatureEntry(
            signer_name=inv.signer_name or inv.recipient_name,
            signed_at=to_iso(inv.signed_at),
            recipient_email=inv.recipient_email,
        )
        for inv in signed
    ]

    invitations = [
        InvitationEntry(
            id=inv.id,
            recipient_name=inv.recipient_name,
            recipient_email=inv.recipient_email,
            status=inv.status.value,
            signed_at=to_iso(inv.signed_at),
            viewed_at=to_iso(inv.viewed_at),
            sent_at=to_iso(inv.created_at),
            expires_at=to_iso(inv.expires_at),
        )
        for inv in document.invitations
    ]

    metrics = CompletionMetrics(
        total_signatures=status.total_signatures,
        completed_signatures=status.completed_signatures,
        progress_percentage=progress_percentage(status.completed_signatures, status.total_signatures),
        is_fully_complete=status.is_ready,
        is_document_finalized=status.is_finalized,
    )

    return CompletionStatusResponse(
        document=DocumentSummary(
            id=document.id,
            title=document.title,
            status=document.status.value,
            finalized_at=to_iso(status.finalized_at),
            completed_document_url=status.completed_document_url,
            created_at=to_iso(document.created_at),
            owner=OwnerSummary(name=document.created_by.name, email=document.created_by.email),
        ),
        signatures=signatures,
        invitations=invitations,
        metrics=metrics,
        finalization_status=FinalizationStatusPayload(
            total_signatures=status.total_signatures,
            completed_signatures=status.completed_signatures,
            is_ready=status.is_ready,
            is_finalized=status.is_finalized,
            finalized_at=to_iso(status.finalized_at),
            completed_document_url=status.completed_document_url,
        ),
    )
