"""Command-line entry point for Campus Events.

Usage:
    python main.py init-db            Create the database schema.
    python main.py create-super-admin USERNAME EMAIL
                                      Create the first super admin account.
"""

import logging
import sys
from typing import List, Optional

from core.database import SessionLocal, init_db
from core.exceptions import CampusEventsError
from core.logging_config import setup_logging
from schemas.identity import Role
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

USAGE = __doc__


def run(argv: List[str]) -> int:
    """Execute one CLI command and return the process exit code."""
    if not argv:
        print(USAGE)
        return 2

    command, args = argv[0], argv[1:]
    if command == "init-db":
        init_db()
        return 0

    if command == "create-super-admin":
        if len(args) != 2:
            print(USAGE)
            return 2
        init_db()
        with SessionLocal() as db:
            try:
                user = UserManager(db).create_user(
                    username=args[0], email=args[1], role=Role.SUPER_ADMIN
                )
            except CampusEventsError as e:
                logger.error("Could not create super admin: %s", e)
                return 1
        print(f"Created super admin '{user.username}' (id {user.user_id})")
        return 0

    print(f"Unknown command: {command}\n")
    print(USAGE)
    return 2


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    setup_logging()
    sys.exit(run(sys.argv[1:] if argv is None else argv))


if __name__ == "__main__":
    main()
