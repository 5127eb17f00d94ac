"""Create the schema and load the catalog and admin account.

Usage: python populate_db.py
"""
import logging

from dotenv import load_dotenv

load_dotenv()

from database import SessionLocal, init_db  # noqa: E402
from seed import seed_database  # noqa: E402


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    init_db()
    session = SessionLocal()
    try:
        seed_database(session)
    finally:
        session.close()
    print("Seeding complete")


if __name__ == "__main__":
    main()
