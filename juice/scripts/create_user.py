"""
Create a user (e.g. the first admin). Run from project root:
  python -m juice.scripts.create_user USERNAME EMAIL PASSWORD [--role NAME] [--admin]
Example:
  python -m juice.scripts.create_user justin justin@example.com your-secure-password --role Admin --admin
"""
import argparse
import logging
import sys

from juice.core.database import SessionLocal
from juice.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MAX_LEN
from juice.services.users import AccountError, create_user, get_or_create_role

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Create a blog user (the HTTP API only lets admins add users)."
    )
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("--role", default=None, help="Role name to attach; created if missing")
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Give the role admin rights (requires --role)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1
    if args.admin and not args.role:
        print("--admin requires --role.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        role_id = None
        if args.role:
            role = get_or_create_role(db, args.role.strip(), admin=args.admin)
            role_id = role.id
        user = create_user(db, username, args.email, args.password, role_id=role_id)
        logger.info("Created user '%s' (id=%s, role_id=%s).", user.username, user.id, role_id)
        return 0
    except AccountError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
