"""Promote an existing account to ADMIN (or set any other role)."""
import argparse
import sys

from garden_club.database import SessionLocal
from garden_club.errors import NotFound
from garden_club.models import Role
from garden_club.services.users import set_role_by_email


def main():
    parser = argparse.ArgumentParser(description="Set the role of a garden club account")
    parser.add_argument("email", help="Email address of a registered account")
    parser.add_argument("--role", default="ADMIN", choices=[r.value for r in Role], help="Role to assign")

    args = parser.parse_args()

    session = SessionLocal()
    try:
        user = set_role_by_email(session, args.email, Role(args.role))
    except NotFound as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        session.close()

    print(f"{user.name} ({user.email}) is now {user.role.value}")


if __name__ == "__main__":
    main()
