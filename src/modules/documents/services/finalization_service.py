import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from PyPDF2 import PdfReader, PdfWriter
from sqlalchemy.orm import Session

from modules.documents.models.document import Document, DocumentStatus
from modules.documents.models.invitation import Invitation, InvitationStatus
from modules.documents.services.exceptions import DocumentNotFoundError, FinalizationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinalizationStatus:
    total_signatures: int
    completed_signatures: int
    is_ready: bool
    is_finalized: bool
    finalized_at: Optional[datetime] = None
    completed_document_url: Optional[str] = None


class FinalizationService:

    @staticmethod
    def _count_invitations(session: Session, document_id: str, status: Optional[InvitationStatus] = None) -> int:
        query = session.query(Invitation).filter(Invitation.document_id == document_id)
        if status is not None:
            query = query.filter(Invitation.status == status)
        return query.count()

    @staticmethod
    def get_finalization_status(session: Session, document_id: str) -> FinalizationStatus:
        """
        Calcula el progreso de firmas de un documento.

        Siempre se recalcula desde la tabla de invitaciones. Si el documento
        no existe lanza DocumentNotFoundError en lugar de devolver ceros.
        """
        document = session.get(Document, document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        total = FinalizationService._count_invitations(session, document_id)
        completed = FinalizationService._count_invitations(session, document_id, InvitationStatus.COMPLETED)

        return FinalizationStatus(
            total_signatures=total,
            completed_signatures=completed,
            is_ready=total > 0 and completed == total,
            is_finalized=document.completed_document_url is not None,
            finalized_at=document.finalized_at,
            completed_document_url=document.completed_document_url,
        )

    @staticmethod
    def finalize_document(session: Session, document_id: str, output_dir: str) -> Document:
        """
        Genera el PDF firmado cuando todas las invitaciones están firmadas.

        Idempotente: un documento ya finalizado se devuelve sin cambios.
        """
        document = session.get(Document, document_id)
        if document is None:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        if document.completed_document_url:
            return document

        status = FinalizationService.get_finalization_status(session, document_id)
        if status.completed_signatures == 0:
            raise FinalizationError("No signatures found to finalize")
        if not status.is_ready:
            raise FinalizationError("Not all required signatures have been collected")

        signed = [inv for inv in document.invitations if inv.signed_at is not None]
        signed.sort(key=lambda inv: inv.signed_at)

        reader = PdfReader(document.file_path)
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)
        writer.add_metadata({
            "/Title": document.title,
            "/Author": document.created_by.name,
            "/Subject": f"Signed Document: {document.title}",
            "/Keywords": ", ".join(
                f"{inv.signer_name or inv.recipient_name} <{inv.recipient_email}> "
                f"{inv.signed_at.isoformat()}"
                for inv in signed
            ),
            "/Creator": "esign",
        })

        os.makedirs(output_dir, exist_ok=True)
        completed_path = os.path.join(output_dir, f"{document.id}_signed.pdf")
        with open(completed_path, "wb") as f:
            writer.write(f)

        document.completed_file_path = completed_path
        document.completed_document_url = f"/documents/{document.id}/download?completed=true"
        document.finalized_at = datetime.utcnow()
        document.status = DocumentStatus.COMPLETED
        session.commit()

        logger.info("Document %s finalized with %d signatures", document.id, len(signed))
        return document
