# create_tables.py
import logging

from database import engine, Base
# Importa todos los modelos para que se registren con Base
from modules.documents.models import User, Document, Invitation  # noqa: F401
from modules.notifications.models.notification import Notification  # noqa: F401

logger = logging.getLogger(__name__)


def crear_tablas():
    """Crea todas las tablas en la base de datos"""
    logger.info("Tablas a crear: %s", list(Base.metadata.tables.keys()))
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    crear_tablas()
