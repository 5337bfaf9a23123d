"""CLI for RepairFlow: create tables and bootstrap users."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys


async def cmd_init_db(args):
    from repairflow.db.engine import engine, init_db

    await init_db()
    await engine.dispose()
    print("Database tables created.")


async def cmd_create_user(args):
    """Create a user, prompting for the password when it is not given."""
    from repairflow.db import crud
    from repairflow.db.engine import async_session_factory, engine, init_db
    from repairflow.services.auth import ROLES, hash_password

    if args.role not in ROLES:
        print(f"Role must be one of: {', '.join(ROLES)}")
        sys.exit(1)

    password = args.password
    if not password:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    await init_db()
    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, args.email):
            print(f"A user with email {args.email} already exists")
            sys.exit(1)
        user = await crud.create_user(
            db, args.email, hash_password(password),
            full_name=args.full_name, role=args.role,
        )
    await engine.dispose()

    print(f"User created: {user.email} (id={user.id}, role={user.role})")


def main():
    parser = argparse.ArgumentParser(description="RepairFlow CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # create-user
    cu = subparsers.add_parser("create-user", help="Create a user")
    cu.add_argument("--email", required=True, help="Login email")
    cu.add_argument("--password", default="", help="Password (prompted if not given)")
    cu.add_argument("--full-name", default="", help="Display name")
    cu.add_argument("--role", default="technician", help="admin | manager | technician")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "create-user":
        asyncio.run(cmd_create_user(args))


if __name__ == "__main__":
    main()
