# src/modules/documents/models/invitation.py

import uuid
from sqlalchemy import Column, ForeignKey, DateTime, String, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base


class InvitationStatus(PyEnum):
    PENDING = "PENDING"
    VIEWED = "VIEWED"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"
    DECLINED = "DECLINED"


class Invitation(Base):
    __tablename__ = "document_invitations"

    id              = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    document_id     = Column(String(36), ForeignKey("documents.id"), nullable=False, index=True)
    recipient_email = Column(String, nullable=False, index=True)
    recipient_name  = Column(String, nullable=False)
    status          = Column(Enum(InvitationStatus), nullable=False, default=InvitationStatus.PENDING)
    token           = Column(String, unique=True, nullable=False)
    expires_at      = Column(DateTime, nullable=False)
    created_at      = Column(DateTime, default=datetime.utcnow, nullable=False)

    viewed_at       = Column(DateTime, nullable=True)
    signed_at       = Column(DateTime, nullable=True)
    signer_name     = Column(String, nullable=True)
    signer_title    = Column(String, nullable=True)

    document = relationship("Document", back_populates="invitations")
