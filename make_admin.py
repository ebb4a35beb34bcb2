#!/usr/bin/env python3
"""
Script to promote an account to the admin role.
Usage: python make_admin.py user@example.edu
"""

import sys

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from unishare.db.database import SessionLocal
from unishare.domain.enums import UserRole
from unishare.infrastructure.orm import UserModel


def make_user_admin(email: str) -> bool:
    """Make a user an admin by email."""
    email = email.strip().lower()
    db = SessionLocal()

    try:
        result = db.execute(
            update(UserModel)
            .where(UserModel.email == email)
            .values(role=UserRole.ADMIN)
        )
        if result.rowcount == 0:
            print(f"User with email '{email}' not found")
            return False
        db.commit()

        user = db.execute(select(UserModel.email, UserModel.role).where(UserModel.email == email)).first()
        print(f"'{user.email}' now has role '{user.role.value}'")
        return True

    except SQLAlchemyError as e:
        print(f"Error: {e}")
        db.rollback()
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__.strip())
        sys.exit(2)
    sys.exit(0 if make_user_admin(sys.argv[1]) else 1)
