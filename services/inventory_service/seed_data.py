import logging

from sqlalchemy.orm import Session

from services.inventory_service.repository import InventoryRepository

logger = logging.getLogger(__name__)

# (name, description, price, stock, category)
SAMPLE_PRODUCTS = [
    ("Wireless Headphones", "Premium wireless headphones with noise cancellation", 79.99, 15, "Electronics"),
    ("Smart Watch Pro", "Advanced smartwatch with health monitoring", 199.99, 8, "Electronics"),
    ("Cotton T-Shirt", "Comfortable cotton t-shirt in various colors", 29.99, 50, "Clothing"),
    ("Running Shoes", "Lightweight running shoes for athletes", 89.99, 3, "Sports"),
    ("Desk Lamp", "Modern LED desk lamp with adjustable brightness", 45.99, 25, "Home"),
    ("Yoga Mat", "Non-slip yoga mat for home workouts", 34.99, 0, "Sports"),
    ("Coffee Maker", "Automatic coffee maker with timer", 129.99, 12, "Home"),
    ("JavaScript Book", "Complete guide to modern JavaScript", 49.99, 20, "Books"),
    ("Denim Jacket", "Classic denim jacket for all seasons", 79.99, 5, "Clothing"),
    ("Bluetooth Speaker", "Portable speaker with 360° sound", 59.99, 18, "Electronics"),
    ("Plant Pot Set", "Set of 3 ceramic plant pots", 24.99, 30, "Home"),
    ("Basketball", "Official size basketball", 39.99, 2, "Sports"),
]


def seed_products(db: Session) -> int:
    """Seed the catalog with sample products if it is empty. Returns rows added."""
    repo = InventoryRepository(db)

    if repo.count_products() > 0:
        logger.info("Catalog already populated, skipping seed")
        return 0

    logger.info("Seeding products...")
    for name, description, price, stock, category in SAMPLE_PRODUCTS:
        repo.create_product(name, description, price, stock, category)

    db.commit()
    logger.info(f"Seeded {len(SAMPLE_PRODUCTS)} products")
    return len(SAMPLE_PRODUCTS)
