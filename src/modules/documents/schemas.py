from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from config import INVITATION_EXPIRY_DAYS, MAX_INVITATION_EXPIRY_DAYS
from modules.documents.models.document import DocumentStatus
from modules.documents.models.invitation import InvitationStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Documentos ---

class DocumentResponse(BaseModel):
    id: str
    title: str
    file_name: str
    file_size: int
    status: DocumentStatus
    created_by_id: int
    created_at: datetime
    finalized_at: Optional[datetime] = None
    completed_document_url: Optional[str] = None

    model_config = {"from_attributes": True}


class UploadResponse(BaseModel):
    message: str
    document_id: str


# --- Invitaciones ---

class SignerIn(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=100)


class SendInvitationsRequest(BaseModel):
    signers: List[SignerIn] = Field(min_length=1)
    expires_in_days: int = Field(default=INVITATION_EXPIRY_DAYS, ge=1, le=MAX_INVITATION_EXPIRY_DAYS)


class InvitationOut(BaseModel):
    id: str
    recipient_email: str
    recipient_name: str
    status: InvitationStatus
    expires_at: datetime
    signing_url: str


class SendInvitationsResponse(BaseModel):
    total_invitations: int
    invitations: List[InvitationOut]


class SigningLinkResponse(BaseModel):
    invitation_id: str
    document_id: str
    document_title: str
    owner_name: str
    recipient_name: str
    recipient_email: str
    status: InvitationStatus
    expires_at: datetime


class SubmitSignatureRequest(BaseModel):
    signer_name: str = Field(min_length=1, max_length=100)
    signer_title: Optional[str] = Field(default=None, max_length=100)


class SubmitSignatureResponse(BaseModel):
    message: str
    all_signatures_complete: bool
    completed_document_url: Optional[str] = None


# --- Estado de finalización ---

class OwnerSummary(CamelModel):
    name: str
    email: str


class DocumentSummary(CamelModel):
    id: str
    title: str
    status: str
    finalized_at: Optional[str]
    completed_document_url: Optional[str]
    created_at: str
    owner: OwnerSummary


class SignatureEntry(CamelModel):
    signer_name: str
    signed_at: str
    recipient_email: str


class InvitationEntry(CamelModel):
    id: str
    recipient_name: str
    recipient_email: str
    status: str
    signed_at: Optional[str]
    viewed_at: Optional[str]
    sent_at: str
    expires_at: str


class CompletionMetrics(CamelModel):
    total_signatures: int
    completed_signatures: int
    progress_percentage: int
    is_fully_complete: bool
    is_document_finalized: bool


class FinalizationStatusPayload(CamelModel):
    total_signatures: int
    completed_signatures: int
    is_ready: bool
    is_finalized: bool
    finalized_at: Optional[str]
    completed_document_url: Optional[str]


class CompletionStatusResponse(CamelModel):
    document: DocumentSummary
    signatures: List[SignatureEntry]
    invitations: List[InvitationEntry]
    metrics: CompletionMetrics
    finalization_status: FinalizationStatusPayload
