# This project was developed with assistance from AI tools.
"""CLI entrypoint for bootstrapping the first superadmin.

Usage:
    python -m src.create_superadmin --username root --email root@example.com \\
        --name "Platform Owner" --password '...'

Superadmins cannot self-register; every later admin is created by a
superadmin through ``POST /api/superadmin/admins``.
"""

import argparse
import asyncio
import getpass
import json
import sys

from db.database import SessionLocal
from db.enums import UserRole

from .services.account import DuplicateAccountError, create_account


async def main(username: str, email: str, name: str, password: str) -> int:
    """Create the account and print it. Returns the process exit code."""
    async with SessionLocal() as session:
        try:
            account = await create_account(
                session,
                username=username,
                email=email,
                name=name,
                password=password,
                role=UserRole.SUPERADMIN,
            )
        except DuplicateAccountError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    print(
        json.dumps(
            {"id": account.id, "username": account.username, "role": account.role.value},
            indent=2,
        )
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a VentureBridge superadmin")
    parser.add_argument("--username", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--name", default="Super Admin")
    parser.add_argument(
        "--password",
        help="Account password (prompted for when omitted)",
    )
    args = parser.parse_args()
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        parser.error("password must be at least 8 characters")
    sys.exit(asyncio.run(main(args.username, args.email, args.name, password)))
