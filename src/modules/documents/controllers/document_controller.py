import logging
from typing import List, Optional

from fastapi import APIRouter, UploadFile, File, Form, HTTPException, Depends, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from config import APP_BASE_URL, COMPLETED_DIR, MAX_FILE_SIZE, UPLOAD_DIR
from database import get_db
from modules.auth.dependencies import get_current_user
from modules.documents.models.user import User
from modules.documents.schemas import (
    CompletionStatusResponse,
    DocumentResponse,
    InvitationOut,
    SendInvitationsRequest,
    SendInvitationsResponse,
    UploadResponse,
)
from modules.documents.services.completion_status import build_completion_status
from modules.documents.services.document_service import DocumentService
from modules.documents.services.exceptions import (
    DocumentNotFoundError,
    FinalizationError,
    InvitationError,
)
from modules.documents.services.finalization_service import FinalizationService
from modules.documents.services.invitation_service import InvitationService

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["documents"]
)

NOT_FOUND_DETAIL = "Document not found or access denied"


def _not_found() -> HTTPException:
    return HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND_DETAIL)


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    contents = await file.read()
    doc = DocumentService.upload_document(
        db, current_user.id, contents, file.filename, file.content_type,
        UPLOAD_DIR, MAX_FILE_SIZE, title=title
    )
    return UploadResponse(message="Document uploaded", document_id=doc.id)


@router.get("", response_model=List[DocumentResponse])
def list_documents(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Documentos propios y aquellos a los que el usuario fue invitado"""
    return DocumentService.get_documents_by_user(db, current_user)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    doc = DocumentService.get_accessible_document(db, document_id, current_user)
    if doc is None:
        raise _not_found()
    return doc


@router.get("/{document_id}/completion-status", response_model=CompletionStatusResponse)
def get_completion_status(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Progreso de firmas, visible para el propietario y los destinatarios
    invitados. Documento inexistente o sin acceso: 404 en ambos casos.
    """
    try:
        document = DocumentService.get_accessible_document(db, document_id, current_user)
        if document is None:
            raise _not_found()
        finalization_status = FinalizationService.get_finalization_status(db, document_id)
        return build_completion_status(document, finalization_status)
    except HTTPException:
        raise
    except DocumentNotFoundError:
        raise _not_found()
    except Exception:
        logger.exception("Completion status failed for document %s", document_id)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to retrieve completion status")


@router.post("/{document_id}/invitations", response_model=SendInvitationsResponse)
def send_invitations(
    document_id: str,
    payload: SendInvitationsRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Crea invitaciones de firma (solo el propietario)"""
    document = DocumentService.get_owned_document(db, document_id, current_user)
    if document is None:
        raise _not_found()
    try:
        invitations = InvitationService.send_invitations(db, document, payload.signers, payload.expires_in_days)
    except InvitationError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))

    return SendInvitationsResponse(
        total_invitations=len(invitations),
        invitations=[
            InvitationOut(
                id=inv.id,
                recipient_email=inv.recipient_email,
                recipient_name=inv.recipient_name,
                status=inv.status,
                expires_at=inv.expires_at,
                signing_url=f"{APP_BASE_URL}/sign/{inv.token}",
            )
            for inv in invitations
        ],
    )


@router.post("/{document_id}/finalize", response_model=DocumentResponse)
def finalize_document(
    document_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Genera el PDF firmado cuando todas las firmas están completas"""
    if DocumentService.get_owned_document(db, document_id, current_user) is None:
        raise _not_found()
    try:
        return FinalizationService.finalize_document(db, document_id, COMPLETED_DIR)
    except FinalizationError as e:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, str(e))


@router.get("/{document_id}/download")
def download_document(
    document_id: str,
    completed: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Devuelve el PDF original o, con ?completed=true, el firmado"""
    doc = DocumentService.get_accessible_document(db, document_id, current_user)
    if doc is None:
        raise _not_found()

    path = DocumentService.get_download_path(doc, completed)
    if path is None:
        detail = "Document has not been finalized yet" if completed else "File not found"
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail)

    filename = f"{doc.title}_signed.pdf" if completed else doc.file_name
    return FileResponse(path, media_type="application/pdf", filename=filename)
