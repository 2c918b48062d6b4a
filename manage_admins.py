#!/usr/bin/env python3
"""
Administrator management CLI for the online voting application.
Run this script to add, list, or remove administrator accounts.

Usage:
    python manage_admins.py add <email> <password> <first_name> [last_name]
    python manage_admins.py list
    python manage_admins.py delete <email>
    python manage_admins.py passwd <email> <new_password>
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.application.errors import VotingError
from app.config import PASSWORD_MIN_LENGTH
from app.database import init_db, get_db
from app.infrastructure.repositories import UserRepository, ElectionRepository
from app.routes.deps import get_auth_service


def print_usage():
    print(__doc__)


def cmd_add(args):
    if len(args) < 3:
        print("Error: add requires <email> <password> <first_name> [last_name]")
        print("Example: python manage_admins.py add admin@example.com mypassword Ada Lovelace")
        return 1

    email, password, first_name = args[0], args[1], args[2]
    last_name = args[3] if len(args) > 3 else ""

    try:
        user = get_auth_service().register(email, password, first_name, last_name)
    except VotingError as e:
        print(f"Error: {e.detail}")
        return 1

    print(f"Administrator '{user['email']}' created successfully (ID: {user['id']})")
    return 0


def cmd_list(args):
    users = UserRepository(get_db()).list_all()
    if not users:
        print("No administrators found. Create one with: python manage_admins.py add <email> <password> <first_name>")
        return 0

    print(f"{'ID':<5} {'Email':<30} {'Name':<30} {'Created'}")
    print("-" * 85)
    for user in users:
        name = f"{user['first_name']} {user['last_name']}".strip()
        print(f"{user['id']:<5} {user['email']:<30} {name:<30} {user['created_at']}")
    return 0


def cmd_delete(args):
    if len(args) < 1:
        print("Error: delete requires <email>")
        return 1

    email = args[0]
    repo = UserRepository(get_db())
    user = repo.get_by_email(email)

    if not user:
        print(f"Error: Administrator '{email}' not found")
        return 1

    owned = ElectionRepository(get_db()).list_by_user(user['id'])
    if owned:
        print(f"Error: '{email}' still owns {len(owned)} election(s)")
        return 1

    # Confirm deletion
    confirm = input(f"Delete administrator '{email}'? [y/N]: ")
    if confirm.lower() != 'y':
        print("Cancelled")
        return 0

    repo.delete(user['id'])
    print(f"Administrator '{email}' deleted")
    return 0


def cmd_passwd(args):
    if len(args) < 2:
        print("Error: passwd requires <email> <new_password>")
        return 1

    email, new_password = args[0], args[1]

    if len(new_password) < PASSWORD_MIN_LENGTH:
        print(f"Error: Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return 1

    repo = UserRepository(get_db())
    user = repo.get_by_email(email)
    if not user:
        print(f"Error: Administrator '{email}' not found")
        return 1

    repo.update_password(user['id'], new_password)
    print(f"Password updated for '{email}'")
    return 0


def main():
    if len(sys.argv) < 2:
        print_usage()
        return 1

    # Initialize database
    init_db()

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    commands = {
        'add': cmd_add,
        'list': cmd_list,
        'delete': cmd_delete,
        'passwd': cmd_passwd,
        'help': lambda _: (print_usage(), 0)[1],
    }

    if command not in commands:
        print(f"Unknown command: {command}")
        print_usage()
        return 1

    return commands[command](args)


if __name__ == "__main__":
    sys.exit(main())
