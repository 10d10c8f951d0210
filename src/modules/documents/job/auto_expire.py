import logging

from apscheduler.schedulers.background import BackgroundScheduler

from config import EXPIRY_JOB_INTERVAL_HOURS
from database import SessionLocal
from modules.documents.services.cleanup import expire_overdue_invitations

logger = logging.getLogger(__name__)


def start_expiration_job() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()

    def job():
        with SessionLocal() as session:
            expire_overdue_invitations(session)

    scheduler.add_job(job, 'interval', hours=EXPIRY_JOB_INTERVAL_HOURS)
    scheduler.start()
    logger.info("Invitation expiry job started (every %sh)", EXPIRY_JOB_INTERVAL_HOURS)
    return scheduler
