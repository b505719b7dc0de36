# fix_order_artist_ids.py
"""
Repair product orders whose artist_id does not point at the user who
owns the product's seller profile.

Usage:
    python fix_order_artist_ids.py
"""

import logging

from sqlmodel import Session

from artmarket.core.config import get_settings
from artmarket.database import build_engine
from artmarket.repositories.cart_repo import CartRepository
from artmarket.repositories.order_repo import OrderRepository
from artmarket.repositories.product_repo import ProductRepository
from artmarket.repositories.seller_repo import SellerRepository
from artmarket.repositories.user_repo import UserRepository
from artmarket.services.order_service import OrderService
from artmarket.services.ownership import OwnershipGuard

logger = logging.getLogger("fix_order_artist_ids")


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    product_repo = ProductRepository()
    seller_repo = SellerRepository()
    service = OrderService(
        OrderRepository(),
        product_repo,
        seller_repo,
        UserRepository(),
        OwnershipGuard(product_repo, seller_repo, CartRepository()),
    )

    engine = build_engine(settings.DATABASE_URL)
    try:
        with Session(engine) as session:
            fixed = service.reconcile_product_order_artists(session)
    finally:
        engine.dispose()

    logger.info("Fixed %d product order(s)", fixed)


if __name__ == "__main__":
    main()
