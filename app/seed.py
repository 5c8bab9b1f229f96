"""
CLI entrypoint for bootstrap seeding (baseline roles and default admin). Run:

  python -m app.seed

The API runs the same routine at startup unless SEED_ON_STARTUP=false.
"""

import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.log import configure_logging
from app.services.bootstrap import seed_defaults

logger = logging.getLogger(__name__)


def main() -> int:
    """Seed roles and the default admin; safe to run repeatedly."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    db = SessionLocal()
    try:
        report = seed_defaults(db, settings)
        logger.info(
            "Seeding completed: roles_created=%s admin_created=%s",
            [r.value for r in report.roles_created],
            report.admin_created,
        )
        return 0
    except Exception as e:
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
