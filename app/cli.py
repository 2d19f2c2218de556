"""CLI commands for Who's for Dinner."""

import argparse
import getpass
import sys

from sqlalchemy.orm import Session

from app.database import SessionLocal, init_db
from app.services.auth.pin_provider import PinAuthProvider
from app.services.session_service import session_service


def create_tables() -> None:
    """Create any missing tables."""
    init_db()
    print("Database tables created.")


def hash_pin(pin: str | None = None) -> None:
    """Print a bcrypt hash suitable for the PIN_HASH setting."""
    if not pin:
        pin = getpass.getpass("PIN: ")
        pin_confirm = getpass.getpass("Confirm PIN: ")
        if pin != pin_confirm:
            print("Error: PINs do not match.")
            sys.exit(1)

    if not pin.strip():
        print("Error: PIN must not be empty.")
        sys.exit(1)

    print(PinAuthProvider.hash_pin(pin))


def sweep_sessions() -> None:
    """Delete expired sessions."""
    db: Session = SessionLocal()

    try:
        count = session_service.sweep_expired(db)
        print(f"Removed {count} expired session(s).")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Who's for Dinner CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")

    hash_pin_parser = subparsers.add_parser(
        "hash-pin", help="Hash the household PIN for PIN_HASH"
    )
    hash_pin_parser.add_argument(
        "--pin", help="PIN to hash (will prompt if not provided)"
    )

    subparsers.add_parser("sweep-sessions", help="Delete expired sessions")

    args = parser.parse_args()

    if args.command == "init-db":
        create_tables()
    elif args.command == "hash-pin":
        hash_pin(args.pin)
    elif args.command == "sweep-sessions":
        sweep_sessions()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
