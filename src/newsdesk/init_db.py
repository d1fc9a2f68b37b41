"""Create the Newsdesk tables directly, for local SQLite development.

Deployed databases are managed with Alembic (``alembic upgrade head``).
"""

import logging

from newsdesk.core.settings import settings
from newsdesk.db.session import create_tables

logger = logging.getLogger(__name__)


def init_db() -> None:
    """Initialize the database by creating all tables."""
    create_tables()
    logger.info("Database initialized at %s", settings.effective_database_url)


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    init_db()
