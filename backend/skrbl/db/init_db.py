import logging

from skrbl.db.session import engine, Base
from skrbl import models  # noqa: F401  registers every table on Base.metadata

logger = logging.getLogger(__name__)

def init_db():
    """Initialize database tables"""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

if __name__ == "__main__":
    from skrbl.core.logging import setup_logging

    setup_logging()
    init_db()
