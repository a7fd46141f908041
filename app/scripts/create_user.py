"""Create a Bountyboard user.

Usage:
    python -m app.scripts.create_user --username alice --password <password> \
        [--email alice@example.com] [--wallet <address>]
"""

from __future__ import annotations

import argparse
import sys

from app.db.session import SessionLocal
from app.services.auth import create_user, get_user_by_username


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a Bountyboard user")
    parser.add_argument("--username", required=True, help="Username for the new user")
    parser.add_argument("--password", required=True, help="Password for the new user")
    parser.add_argument("--email", default=None, help="Email for winner notifications")
    parser.add_argument("--wallet", default=None, help="Payout wallet address")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        existing = get_user_by_username(db, args.username)
        if existing:
            print(f"User '{args.username}' already exists.")
            sys.exit(1)

        user = create_user(
            db, args.username, args.password, email=args.email, wallet_address=args.wallet
        )
        print(f"User '{user.username}' created successfully (id={user.id}).")
    finally:
        db.close()


if __name__ == "__main__":
    main()
