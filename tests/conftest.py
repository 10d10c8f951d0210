import io
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="esign-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["COMPLETED_DIR"] = os.path.join(_TMP_DIR, "completed")
os.environ["SECRET_KEY"] = "test-secret"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from reportlab.pdfgen import canvas
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from modules.auth.services.auth_service import AuthService
from modules.documents.models import Document, DocumentStatus, Invitation, InvitationStatus, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session(clean_db):
    db = TestingSessionLocal()
    yield db
    db.close()


@pytest.fixture
def client(clean_db):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_dummy_pdf_bytes(text="PDF para test"):
    buf = io.BytesIO()
    c = canvas.Canvas(buf)
    c.drawString(50, 750, text)
    c.save()
    buf.seek(0)
    return buf.read()


@pytest.fixture(scope="session")
def example_pdf():
    return create_dummy_pdf_bytes()


def create_user(session, email, name="Test"):
    user = User(name=name, email=email, password_hash="x", is_active=True)
    session.add(user)
    session.commit()
    return user


def create_document(session, owner, tmp_path, title="Contrato", status=DocumentStatus.SENT):
    path = tmp_path / f"{title}.pdf"
    path.write_bytes(create_dummy_pdf_bytes(title))
    doc = Document(
        title=title,
        file_name=f"{title}.pdf",
        file_path=str(path),
        file_size=path.stat().st_size,
        status=status,
        created_by_id=owner.id,
    )
    session.add(doc)
    session.commit()
    return doc


def create_invitation(session, document, email, status=InvitationStatus.PENDING, signed_at=None,
                      created_at=None, expires_in=timedelta(days=7), token=None, **fields):
    now = datetime.utcnow()
    inv = Invitation(
        document_id=document.id,
        recipient_email=email,
        recipient_name=fields.pop("recipient_name", email.split("@")[0]),
        status=status,
        token=token or f"tok-{email}",
        created_at=created_at or now,
        expires_at=now + expires_in,
        signed_at=signed_at,
        **fields
    )
    session.add(inv)
    session.commit()
    return inv


def auth_headers(user):
    token = AuthService.create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}
