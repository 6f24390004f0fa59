"""
Seed a demo establishment with a small menu.

Creates the establishment for the given owner id unless one with the same
name already exists for that owner, then adds any missing products.

Usage:
    python -m marketplace.seeds.demo [OWNER_ID]
"""

import sys

from sqlmodel import Session, select

from marketplace.db import create_db_and_tables, engine
from marketplace.models import Establishment, Product

DEMO_ESTABLISHMENT = {
    "name": "Demo Bistro",
    "address": "1 Market Street",
}

# name -> (price_cents, description)
DEMO_PRODUCTS = {
    "Espresso": (250, "Single shot"),
    "Cappuccino": (380, "Espresso with steamed milk foam"),
    "Croissant": (300, "Butter croissant, baked daily"),
    "Club Sandwich": (1000, "Chicken, bacon, lettuce and tomato"),
    "Lemonade": (500, None),
}


def seed_demo(owner_id: int) -> dict[str, int]:
    """
    Create the demo establishment and its products.

    Returns:
        dict with the establishment id and the number of products created
    """
    create_db_and_tables()
    with Session(engine) as session:
        establishment = session.exec(
            select(Establishment).where(
                Establishment.owner_id == owner_id,
                Establishment.name == DEMO_ESTABLISHMENT["name"],
            )
        ).first()

        if not establishment:
            establishment = Establishment(owner_id=owner_id, **DEMO_ESTABLISHMENT)
            session.add(establishment)
            session.commit()
            session.refresh(establishment)
            print(f"Created establishment #{establishment.id}: {establishment.name}")

        products_created = 0
        for name, (price_cents, description) in DEMO_PRODUCTS.items():
            existing = session.exec(
                select(Product).where(
                    Product.establishment_id == establishment.id,
                    Product.name == name,
                )
            ).first()
            if existing:
                continue
            session.add(Product(
                name=name,
                description=description,
                price_cents=price_cents,
                establishment_id=establishment.id,
            ))
            products_created += 1
            print(f"  Created product: {name} ({price_cents / 100:.2f})")
        session.commit()

        return {
            "establishment_id": establishment.id,
            "products_created": products_created,
        }


if __name__ == "__main__":
    owner = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    print(f"Seeding demo data for owner {owner}...")
    result = seed_demo(owner)
    print(f"\nComplete!")
    print(f"  Establishment: #{result['establishment_id']}")
    print(f"  Products created: {result['products_created']}")
