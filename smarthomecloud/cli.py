"""CLI for SmartHomeCloud: bootstrap the database and manage accounts."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import sys

ROLES = ("homeowner", "iot_team", "cloud_staff")


async def cmd_init_db(args):
    """Create all tables."""
    from smarthomecloud.config import get_settings
    from smarthomecloud.db.engine import create_all

    await create_all()
    print(f"Database ready: {get_settings().database_url}")


async def cmd_create_user(args):
    """Create a local account with a password."""
    from smarthomecloud.db import crud
    from smarthomecloud.db.engine import async_session_factory, create_all
    from smarthomecloud.services.auth import hash_password

    await create_all()

    password = args.password
    if not password:
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match")
            sys.exit(1)

    if len(password) < 6:
        print("Password must be at least 6 characters")
        sys.exit(1)

    async with async_session_factory() as db:
        if await crud.get_user_by_email(db, args.email):
            print(f"User {args.email} already exists")
            sys.exit(1)
        user = await crud.create_user(
            db,
            email=args.email,
            first_name=args.first_name,
            last_name=args.last_name,
            role=args.role,
            password_hash=hash_password(password),
        )

    print(f"User created: {user.email} (id={user.id}, role={user.role})")


async def cmd_set_role(args):
    """Change an existing user's role."""
    from smarthomecloud.db import crud
    from smarthomecloud.db.engine import async_session_factory
    from smarthomecloud.services.access import LastCloudStaffError, ensure_cloud_staff_remains

    async with async_session_factory() as db:
        user = await crud.get_user_by_email(db, args.email)
        if not user:
            print(f"No user with email {args.email}")
            sys.exit(1)
        old_role = user.role
        if args.role != old_role:
            try:
                await ensure_cloud_staff_remains(db, user)
            except LastCloudStaffError as e:
                print(f"ERROR: {e}")
                sys.exit(1)
        await crud.update_user(db, user, role=args.role)

    print(f"{args.email}: {old_role} -> {args.role}")


async def cmd_encrypt_feeds(args):
    """Encrypt surveillance feed URLs that were stored before FERNET_KEY was set."""
    from sqlalchemy import text

    from smarthomecloud.db.engine import async_session_factory
    from smarthomecloud.services import encryption

    if not encryption.has_key():
        print("ERROR: FERNET_KEY environment variable must be set.")
        print('Generate one with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())"')
        sys.exit(1)

    count = 0
    async with async_session_factory() as db:
        # raw SQL so the column type does not unseal on read
        rows = (await db.execute(text("SELECT id, feed_url FROM surveillance_feeds"))).fetchall()
        for feed_id, url in rows:
            if url and not encryption.is_sealed(url):
                await db.execute(
                    text("UPDATE surveillance_feeds SET feed_url = :url WHERE id = :id"),
                    {"url": encryption.seal(url), "id": feed_id},
                )
                count += 1
        await db.commit()

    print(f"Encrypted {count} feed URL(s).")


def main():
    parser = argparse.ArgumentParser(description="SmartHomeCloud CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create database tables")

    cu = subparsers.add_parser("create-user", help="Create a local user account")
    cu.add_argument("--email", required=True)
    cu.add_argument("--first-name", default="")
    cu.add_argument("--last-name", default="")
    cu.add_argument("--role", choices=ROLES, default="homeowner")
    cu.add_argument("--password", default="", help="Password (prompted if not given)")

    sr = subparsers.add_parser("set-role", help="Change a user's role")
    sr.add_argument("--email", required=True)
    sr.add_argument("--role", choices=ROLES, required=True)

    subparsers.add_parser("encrypt-feeds", help="Encrypt plaintext feed URLs (requires FERNET_KEY)")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "create-user":
        asyncio.run(cmd_create_user(args))
    elif args.command == "set-role":
        asyncio.run(cmd_set_role(args))
    elif args.command == "encrypt-feeds":
        asyncio.run(cmd_encrypt_feeds(args))


if __name__ == "__main__":
    main()
