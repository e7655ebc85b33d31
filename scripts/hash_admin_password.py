#!/usr/bin/env python3
"""
Print a bcrypt hash for the administrator password.

Usage:
  python scripts/hash_admin_password.py
  # paste the output into .env as ADMIN_PASSWORD_HASH=...
"""
import getpass
import os
import sys

# Hashing needs no database; satisfy the required settings if unset
os.environ.setdefault("DATABASE_URL", "postgresql://localhost/unused")
os.environ.setdefault("SECRET_KEY", "unused")

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.security import get_password_hash


def main():
    password = getpass.getpass("Admin password: ")
    if len(password) < 8:
        print("ERROR: password must be at least 8 characters.")
        sys.exit(1)
    if getpass.getpass("Repeat password: ") != password:
        print("ERROR: passwords do not match.")
        sys.exit(1)
    print(get_password_hash(password))


if __name__ == "__main__":
    main()
