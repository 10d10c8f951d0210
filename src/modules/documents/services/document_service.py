import io
import logging
import os
import re
from typing import Optional

from PyPDF2 import PdfReader
from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from modules.documents.models.document import Document, DocumentStatus
from modules.documents.models.invitation import Invitation
from modules.documents.models.user import User

logger = logging.getLogger(__name__)


class DocumentService:

    @staticmethod
    def _accessible_by(user: User):
        """Propietario, o alguna invitación dirigida al email del usuario (sin distinguir mayúsculas)"""
        return or_(
            Document.created_by_id == user.id,
            Document.invitations.any(func.lower(Invitation.recipient_email) == user.email.lower()),
        )

    @staticmethod
    def get_accessible_document(session: Session, document_id: str, user: User) -> Optional[Document]:
        """
        Obtiene el documento solo si el usuario es el propietario o fue invitado a firmarlo.

        Devuelve None tanto si no existe como si no hay acceso; el llamador
        no puede distinguir ambos casos.
        """
        return (
            session.query(Document)
            .options(selectinload(Document.invitations), joinedload(Document.created_by))
            .filter(Document.id == document_id, DocumentService._accessible_by(user))
            .first()
        )

    @staticmethod
    def get_owned_document(session: Session, document_id: str, user: User) -> Optional[Document]:
        return (
            session.query(Document)
            .filter(Document.id == document_id, Document.created_by_id == user.id)
            .first()
        )

    @staticmethod
    def get_documents_by_user(session: Session, user: User) -> list[Document]:
        """
        Documentos propios y documentos a los que el usuario fue invitado
        """
        return (
            session.query(Document)
            .filter(DocumentService._accessible_by(user))
            .order_by(Document.created_at.desc())
            .all()
        )

    @staticmethod
    def upload_document(
        session: Session,
        user_id: int,
        file_contents: bytes,
        filename: str,
        content_type: str,
        upload_dir: str,
        max_file_size: int,
        title: Optional[str] = None
    ) -> Document:
        """
        Procesa y guarda un documento completo:
        - Valida el archivo
        - Determina nombre único
        - Guarda archivo físico
        - Crea registro en BD
        """
        DocumentService._validate_file(file_contents, filename, content_type, max_file_size)

        unique_name = DocumentService._get_unique_filename(session, user_id, os.path.basename(filename))

        user_dir = os.path.join(upload_dir, str(user_id))
        os.makedirs(user_dir, exist_ok=True)
        file_path = os.path.join(user_dir, unique_name)
        with open(file_path, "wb") as f:
            f.write(file_contents)

        document = Document(
            title=(title or "").strip() or os.path.splitext(unique_name)[0],
            file_name=unique_name,
            file_path=file_path,
            file_size=len(file_contents),
            status=DocumentStatus.DRAFT,
            created_by_id=user_id,
        )
        session.add(document)
        session.commit()

        logger.info("Document %s uploaded by user %s (%d bytes)", document.id, user_id, document.file_size)
        return document

    @staticmethod
    def _validate_file(file_contents: bytes, filename: str, content_type: str, max_file_size: int):
        """Valida el archivo subido"""
        if content_type != "application/pdf":
            raise HTTPException(400, "File must be a PDF")

        if not filename or not filename.lower().endswith(".pdf"):
            raise HTTPException(400, "File extension must be .pdf")

        if not file_contents:
            raise HTTPException(400, "File is empty")

        if len(file_contents) > max_file_size:
            raise HTTPException(400, f"Maximum file size is {max_file_size // (1024 * 1024)} MB")

        try:
            reader = PdfReader(io.BytesIO(file_contents))
            _ = reader.pages[0]
        except Exception:
            raise HTTPException(400, "Invalid or corrupted PDF")

    @staticmethod
    def _get_unique_filename(session: Session, user_id: int, original_name: str) -> str:
        """nombre.pdf, nombre_1.pdf, nombre_2.pdf... por usuario"""
        base, ext = os.path.splitext(original_name)

        existing = {
            row[0]
            for row in session.query(Document.file_name)
            .filter(
                Document.created_by_id == user_id,
                or_(Document.file_name == original_name, Document.file_name.like(f"{base}\\_%{ext}", escape="\\"))
            )
            .all()
        }
        if original_name not in existing:
            return original_name

        suffix = re.compile(rf"^{re.escape(base)}_(\d+){re.escape(ext)}$")
        used = set()
        for name in existing:
            match = suffix.match(name)
            if match:
                used.add(int(match.group(1)))

        next_num = 1
        while next_num in used:
            next_num += 1
        return f"{base}_{next_num}{ext}"

    @staticmethod
    def get_download_path(document: Document, completed: bool = False) -> Optional[str]:
        """Ruta del PDF original o del firmado; None si no existe"""
        path = document.completed_file_path if completed else document.file_path
        if not path or not os.path.exists(path):
            return None
        return path
