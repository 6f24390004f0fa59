"""
Reset the database.
WARNING: This deletes all establishments, products and orders.

Usage:
    python -m marketplace.seeds.clear_data
"""

from sqlmodel import Session, delete

from marketplace.db import engine
from marketplace.models import Establishment, Order, OrderItem, Product

# Children first, to respect foreign keys
TABLES_TO_CLEAR = [OrderItem, Order, Product, Establishment]


def clear_all_data() -> None:
    print("Starting data cleanup...")

    with Session(engine) as session:
        for table in TABLES_TO_CLEAR:
            session.exec(delete(table))
            print(f"Cleared table: {table.__name__}")
        session.commit()

    print("\nCleanup finished!")


if __name__ == "__main__":
    clear_all_data()
