"""
Composition root of the ordering core.

Wires config, logging, the snapshot store, the cart engine and the checkout
flow. The hosting app (web view, kiosk, tests) calls these builders once per
customer device and keeps the returned objects; nothing here is a
module-level singleton.

Usage:
    setup_logging()
    await create_db_and_tables()
    cart = build_cart_service(client_id=device_id)
    checkout = build_checkout_service(cart)
    result = await checkout.checkout()
"""

import logging
from pathlib import Path

from redis import Redis

import config
from db import get_db_session
from models.cart import PreparedCartDTO
from models.order import OrderCreatedDTO
from repositories.cart_snapshot import CartSnapshotStore, FileCartSnapshotRepository, RedisCartSnapshotRepository
from services.cart import CartService
from services.checkout import CheckoutService
from services.order import OrderService


def _silence_sql_loggers():
    for logger_name in ['aiosqlite', 'sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.orm']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


_silence_sql_loggers()


def build_redis_client() -> Redis:
    return Redis(
        host=config.REDIS_HOST,
        port=config.REDIS_PORT,
        password=config.REDIS_PASSWORD,
        db=config.REDIS_DB
    )


def build_snapshot_store(client_id: str | None = None, redis: Redis | None = None) -> CartSnapshotStore:
    """
    Snapshot store chosen by config.CART_STORE_BACKEND.

    Args:
        client_id: Device/session id, keeps carts of different devices apart
        redis: Redis client to reuse (redis backend only)

    Returns:
        RedisCartSnapshotRepository under CART_STORE_NAME[:client_id], or
        FileCartSnapshotRepository at CART_STORE_PATH (suffixed with client_id)
    """
    if config.CART_STORE_BACKEND == "redis":
        key = f"{config.CART_STORE_NAME}:{client_id}" if client_id else config.CART_STORE_NAME
        return RedisCartSnapshotRepository(redis if redis is not None else build_redis_client(), key)

    path = Path(config.CART_STORE_PATH)
    if client_id:
        path = path.with_name(f"{path.stem}-{client_id}{path.suffix}")
    return FileCartSnapshotRepository(path)


def build_cart_service(client_id: str | None = None, store: CartSnapshotStore | None = None) -> CartService:
    """Cart engine restored from its snapshot store."""
    store = store or build_snapshot_store(client_id)
    cart_service = CartService(store=store, default_currency=config.DEFAULT_CURRENCY)
    logging.info(f"🛒 Cart ready ({store.key}): {cart_service.get_unique_item_count()} lines")
    return cart_service


async def create_order_via_db(prepared: PreparedCartDTO) -> OrderCreatedDTO:
    """Order creator used by the checkout flow: one DB session per order."""
    async with get_db_session() as session:
        return await OrderService.create_order(prepared, session)


def build_checkout_service(cart_service: CartService) -> CheckoutService:
    return CheckoutService(cart_service, create_order_via_db)
