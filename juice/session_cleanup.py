"""
Prune login sessions whose tokens have expired.

Tokens stop working at their exp claim anyway; this only keeps the
user_sessions table from growing. Schedule it with cron, for example nightly:

  15 3 * * * cd /srv/the-juice && .venv/bin/python -m juice.session_cleanup
"""

import logging
import sys

from juice.core.config import get_settings
from juice.core.database import SessionLocal
from juice.services.sessions import run_session_cleanup

logger = logging.getLogger("juice.session_cleanup")


def main() -> int:
    """Exit status 0 on success, 1 if the database work failed."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    db = SessionLocal()
    try:
        removed = run_session_cleanup(db, get_settings())
    except Exception:
        db.rollback()
        logger.exception("Could not prune expired sessions")
        return 1
    finally:
        db.close()
    logger.info("Pruned %s expired session(s)", removed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
