# src/modules/documents/controllers/signing_controller.py
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session

from config import COMPLETED_DIR
from database import get_db
from modules.documents.schemas import (
    SigningLinkResponse,
    SubmitSignatureRequest,
    SubmitSignatureResponse,
)
from modules.documents.services.exceptions import InvitationError, InvitationNotFoundError
from modules.documents.services.invitation_service import InvitationService

# Enlaces de firma: el token de la invitación es la credencial
router = APIRouter(
    tags=["signing"]
)


def _to_http(e: InvitationError) -> HTTPException:
    if isinstance(e, InvitationNotFoundError):
        return HTTPException(status.HTTP_404_NOT_FOUND, str(e))
    return HTTPException(status.HTTP_400_BAD_REQUEST, str(e))


@router.get("/{token}", response_model=SigningLinkResponse)
def validate_signing_link(token: str, db: Session = Depends(get_db)):
    """Valida el enlace y marca la invitación como vista"""
    try:
        inv = InvitationService.get_invitation_for_signing(db, token)
    except InvitationError as e:
        raise _to_http(e)

    return SigningLinkResponse(
        invitation_id=inv.id,
        document_id=inv.document_id,
        document_title=inv.document.title,
        owner_name=inv.document.created_by.name,
        recipient_name=inv.recipient_name,
        recipient_email=inv.recipient_email,
        status=inv.status,
        expires_at=inv.expires_at,
    )


@router.post("/{token}", response_model=SubmitSignatureResponse)
def submit_signature(token: str, payload: SubmitSignatureRequest, db: Session = Depends(get_db)):
    try:
        inv, all_complete = InvitationService.submit_signature(
            db, token, payload.signer_name, payload.signer_title, COMPLETED_DIR
        )
    except InvitationError as e:
        raise _to_http(e)

    return SubmitSignatureResponse(
        message="Document signed successfully",
        all_signatures_complete=all_complete,
        completed_document_url=inv.document.completed_document_url,
    )


@router.post("/{token}/decline")
def decline_invitation(token: str, db: Session = Depends(get_db)):
    try:
        InvitationService.decline_invitation(db, token)
    except InvitationError as e:
        raise _to_http(e)
    return {"message": "Invitation declined"}
