import uuid
from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from database import Base


class DocumentStatus(PyEnum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PARTIALLY_SIGNED = "PARTIALLY_SIGNED"
    COMPLETED = "COMPLETED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class Document(Base):
    __tablename__ = 'documents'

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False, default="application/pdf")
    status = Column(Enum(DocumentStatus), nullable=False, default=DocumentStatus.DRAFT)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Documento final firmado
    completed_document_url = Column(String, nullable=True)
    completed_file_path = Column(String, nullable=True)
    finalized_at = Column(DateTime, nullable=True)

    created_by_id = Column(Integer, ForeignKey('users.id'), nullable=False)
    created_by = relationship("User", back_populates="documents")

    invitations = relationship(
        "Invitation",
        back_populates="document",
        order_by="Invitation.created_at",
        cascade="all, delete-orphan"
    )
