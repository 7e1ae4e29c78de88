"""Initialize the results database for local development."""

import logging

from drillscore.config import get_settings
from drillscore.database import init_db
from drillscore.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main():
    """Create all tables in the database."""
    setup_logging()
    init_db()
    logger.info(f"Database tables created at {get_settings().database_url_sync}")


if __name__ == "__main__":
    main()
