"""
Create a user with explicit roles (e.g. a moderator). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [ROLE ...]
Example:
  python -m app.scripts.create_user alice alice@example.com your-secure-password ADMIN USER
"""
import argparse
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.models import RoleName
from app.schemas.user import RegistrationRequest
from app.services.errors import DuplicateIdentityError
from app.services.users import UserDirectory


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account with the given roles.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("email", help="E-mail address")
    parser.add_argument("password", help="Password (PASSWORD_MIN_LENGTH chars to 72 bytes)")
    parser.add_argument(
        "roles",
        nargs="*",
        type=RoleName,
        metavar="ROLE",
        help="Roles to assign: ADMIN, USER, MODERATOR (default: USER)",
    )
    args = parser.parse_args(argv)

    try:
        candidate = RegistrationRequest(
            username=args.username, email=args.email, password=args.password
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(p) for p in err["loc"])
            print(f"Invalid {field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        directory = UserDirectory(db)
        try:
            user = directory.create_user(
                username=candidate.username,
                email=str(candidate.email),
                password=candidate.password,
                roles=args.roles or [RoleName.USER],
            )
        except DuplicateIdentityError as e:
            print(f"{e.message}.", file=sys.stderr)
            return 1
        granted = sorted(r.value for r in user.role_names)
        print(f"Created user '{user.username}' with roles {granted}.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
