#!/usr/bin/env python3
"""
Create an ADMIN member. Signup only ever creates USER members.

Usage:
    python scripts/create_admin.py admin@example.com 'a-long-password' "Ops Admin"
"""
import argparse
import os
import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from evcharge.core.errors import BusinessError
from evcharge.db import SessionLocal, init_db
from evcharge.security.rbac import Role
from evcharge.services.auth_service import create_member


def main():
    parser = argparse.ArgumentParser(description='Create an ADMIN member')
    parser.add_argument('email')
    parser.add_argument('password')
    parser.add_argument('name')
    args = parser.parse_args()

    if len(args.password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    init_db()
    db = SessionLocal()
    try:
        member = create_member(db, args.email, args.password, args.name, Role.ADMIN)
        print(f"Created admin {member.email} (id={member.id})")
    except BusinessError as e:
        print(f"Could not create admin: {e.code.name}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == '__main__':
    main()
