"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import sys
import os
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from fakeredis import FakeRedis
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Mock config module completely before any imports (no .env needed)
config_mock = MagicMock()
config_mock.RUNTIME_ENVIRONMENT = "TEST"
config_mock.DB_NAME = "emenu-test.db"
config_mock.REDIS_HOST = "localhost"
config_mock.REDIS_PORT = 6379
config_mock.REDIS_PASSWORD = None
config_mock.REDIS_DB = 0
config_mock.CART_STORE_BACKEND = "file"
config_mock.CART_STORE_NAME = "e-menum-cart-store"
config_mock.CART_STORE_PATH = "data/cart-store.json"
config_mock.DEFAULT_CURRENCY = "TRY"
config_mock.MENU_LANGUAGE = "tr"
config_mock.LOG_LEVEL = "INFO"
config_mock.LOG_MASK_SECRETS = True
config_mock.LOG_RETENTION_DAYS = 5

sys.modules['config'] = config_mock

from models.base import Base  # noqa: E402
import db  # noqa: E402,F401  (registers every model on Base.metadata)
from models.cart import (  # noqa: E402
    AddItemInputDTO,
    CartContextDTO,
    SelectedModifierDTO,
    SelectedModifierOptionDTO,
)

FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def session():
    """In-memory SQLite session (sync Session, repositories accept both)."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    session = Session(engine)
    yield session
    session.rollback()
    session.close()
    engine.dispose()


# ============================================================================
# Redis Fixtures
# ============================================================================

@pytest.fixture
def redis_client():
    """Fake Redis client for testing (no real Redis server needed)."""
    client = FakeRedis()
    yield client
    client.close()


# ============================================================================
# Cart Fixtures
# ============================================================================

@pytest.fixture
def context():
    return CartContextDTO(
        organization_id="org-1",
        organization_slug="kebapci-mehmet",
        organization_name="Kebapçı Mehmet",
        table_id="table-5",
        table_name="Masa 5",
        currency="TRY"
    )


@pytest.fixture
def takeaway_context(context):
    return context.model_copy(update={"table_id": None, "table_name": None})


def make_modifier(modifier_id, name, options=(), is_required=False, min_selections=0, max_selections=0):
    """Build a SelectedModifierDTO from (option_id, adjustment) pairs."""
    return SelectedModifierDTO(
        modifier_id=modifier_id,
        modifier_name=name,
        is_required=is_required,
        min_selections=min_selections,
        max_selections=max_selections,
        selected_options=tuple(
            SelectedModifierOptionDTO(option_id=option_id, option_name=option_id.title(), price_adjustment=Decimal(adjustment))
            for option_id, adjustment in options
        )
    )


def make_add_input(product_id="burger", price="100.00", quantity=1, modifiers=(), **kwargs):
    return AddItemInputDTO(
        product_id=product_id,
        product_name=kwargs.pop("product_name", product_id.title()),
        price=Decimal(price),
        quantity=quantity,
        modifiers=tuple(modifiers),
        **kwargs
    )


@pytest.fixture
def modifier_factory():
    return make_modifier


@pytest.fixture
def add_input_factory():
    return make_add_input


@pytest.fixture
def clock():
    """Controllable UTC clock for CartService(now=...)."""
    current = {"now": FIXED_NOW}

    def now():
        return current["now"]

    now.current = current
    return now
