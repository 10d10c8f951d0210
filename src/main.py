import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from config import CORS_ORIGINS, SEED_DEMO_DATA
from create_tables import crear_tablas
from database import SessionLocal
from logging_setup import setup_logging

from modules.documents.job import start_expiration_job
from modules.documents.models import User
from modules.auth.services.auth_service import AuthService
from modules.auth.controllers.auth_controller import router as auth_router
from modules.documents.controllers.document_controller import router as document_router
from modules.documents.controllers.signing_controller import router as signing_router
from modules.notifications.controllers.notification_controller import router as notification_router

logger = setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup logic ---
    logger.info("Starting application")
    crear_tablas()
    scheduler = start_expiration_job()
    if SEED_DEMO_DATA:
        _crear_datos_prueba()
    yield
    # --- Shutdown logic ---
    scheduler.shutdown(wait=False)
    logger.info("Application stopped")


def _crear_datos_prueba():
    """Crea usuarios de demostración."""
    with SessionLocal() as session:
        if session.query(User).count() > 0:
            logger.info("Demo data already present")
            return

        owner = User(
            name="Ana García",
            email="ana@example.com",
            password_hash=AuthService.get_password_hash("ana12345"),
            is_active=True
        )
        signer = User(
            name="Juan Pérez",
            email="juan@example.com",
            password_hash=AuthService.get_password_hash("juan12345"),
            is_active=True
        )
        session.add_all([owner, signer])
        session.commit()

        logger.info("Demo users created: %s, %s", owner.email, signer.email)


app = FastAPI(
    title="E-Signature Service",
    description="API para subir documentos, invitar firmantes y seguir el estado de firma",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Accept", "Content-Type", "Authorization", "X-Requested-With", "Origin"],
    max_age=86400,
)

# Routers
app.include_router(auth_router)
app.include_router(notification_router, prefix="/notifications", tags=["notifications"])
app.include_router(document_router, prefix="/documents")
app.include_router(signing_router, prefix="/sign")

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
