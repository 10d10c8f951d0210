import os

import pytest
from fastapi import HTTPException

from conftest import create_document, create_dummy_pdf_bytes, create_invitation, create_user
from modules.documents.models import Document, DocumentStatus
from modules.documents.services.document_service import DocumentService

MAX_FILE_SIZE = 10 * 1024 * 1024


def upload_pdf_obj(session, user_id, upload_dir, filename="some.pdf"):
    return DocumentService.upload_document(
        session, user_id, create_dummy_pdf_bytes(), filename, "application/pdf", str(upload_dir), MAX_FILE_SIZE
    )


def test_rechazar_no_pdf(session, tmp_path):
    user = create_user(session, "test@mail.com")
    with pytest.raises(HTTPException):
        DocumentService.upload_document(
            session, user.id, b"Fake DOCX content", "no_pdf.docx",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            str(tmp_path), MAX_FILE_SIZE
        )


def test_rechazar_pdf_demasiado_grande(session, tmp_path):
    user = create_user(session, "test@mail.com")
    with pytest.raises(HTTPException) as exc:
        DocumentService.upload_document(
            session, user.id, create_dummy_pdf_bytes(), "grande.pdf", "application/pdf", str(tmp_path), 10
        )
    assert exc.value.status_code == 400


def test_subir_pdf_valido(session, tmp_path):
    user = create_user(session, "test@mail.com")
    doc = upload_pdf_obj(session, user.id, tmp_path, "prueba.pdf")
    assert doc.id is not None
    assert doc.status == DocumentStatus.DRAFT
    assert doc.created_by_id == user.id
    assert os.path.exists(doc.file_path)


def test_nombres_unicos_por_usuario(session, tmp_path):
    user = create_user(session, "test@mail.com")
    other = create_user(session, "otro@mail.com")
    names = [upload_pdf_obj(session, user.id, tmp_path, "dup.pdf").file_name for _ in range(3)]
    assert names == ["dup.pdf", "dup_1.pdf", "dup_2.pdf"]
    # otro usuario no colisiona
    assert upload_pdf_obj(session, other.id, tmp_path, "dup.pdf").file_name == "dup.pdf"


def test_nombre_unico_reutiliza_hueco(session, tmp_path):
    user = create_user(session, "test@mail.com")
    first = upload_pdf_obj(session, user.id, tmp_path, "hueco.pdf")
    second = upload_pdf_obj(session, user.id, tmp_path, "hueco.pdf")
    upload_pdf_obj(session, user.id, tmp_path, "hueco.pdf")
    session.delete(second)
    session.commit()
    assert first.file_name == "hueco.pdf"
    assert upload_pdf_obj(session, user.id, tmp_path, "hueco.pdf").file_name == "hueco_1.pdf"


def test_acceso_propietario(session, tmp_path):
    owner = create_user(session, "owner@mail.com")
    doc = create_document(session, owner, tmp_path)
    found = DocumentService.get_accessible_document(session, doc.id, owner)
    assert found is not None
    assert found.created_by.email == "owner@mail.com"


def test_acceso_destinatario_invitado(session, tmp_path):
    owner = create_user(session, "owner@mail.com")
    signer = create_user(session, "signer@mail.com")
    doc = create_document(session, owner, tmp_path)
    create_invitation(session, doc, "signer@mail.com")
    assert DocumentService.get_accessible_document(session, doc.id, signer).id == doc.id


def test_sin_acceso_devuelve_none(session, tmp_path):
    owner = create_user(session, "owner@mail.com")
    stranger = create_user(session, "stranger@mail.com")
    doc = create_document(session, owner, tmp_path)
    create_invitation(session, doc, "someone-else@mail.com")
    assert DocumentService.get_accessible_document(session, doc.id, stranger) is None
    assert DocumentService.get_accessible_document(session, "no-existe", owner) is None


def test_acceso_no_modifica_documento(session, tmp_path):
    owner = create_user(session, "owner@mail.com")
    doc = create_document(session, owner, tmp_path)
    before = (doc.status, doc.updated_at)
    DocumentService.get_accessible_document(session, doc.id, owner)
    session.expire_all()
    after = session.get(Document, doc.id)
    assert (after.status, after.updated_at) == before


def test_acceso_destinatario_sin_distinguir_mayusculas(session, tmp_path):
    owner = create_user(session, "owner@mail.com")
    signer = create_user(session, "signer@mail.com")
    doc = create_document(session, owner, tmp_path)
    create_invitation(session, doc, "Signer@Mail.com")
    assert DocumentService.get_accessible_document(session, doc.id, signer).id == doc.id
    assert [d.id for d in DocumentService.get_documents_by_user(session, signer)] == [doc.id]
