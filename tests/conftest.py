import os
from types import SimpleNamespace

import pytest

# Settings are read when the app module is imported
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

from fastapi.testclient import TestClient  # noqa: E402

from fakes import FakeSupabase  # noqa: E402
from motorbuy.dependencies import get_current_user, get_current_user_optional  # noqa: E402
from motorbuy.main import app  # noqa: E402
from motorbuy.supabase_client import get_supabase_client  # noqa: E402


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_supabase_client] = lambda: db
    app.dependency_overrides[get_current_user_optional] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Makes every following request act as ``user``; None signs out."""

    def _login(user):
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
            app.dependency_overrides[get_current_user_optional] = lambda: None
            return
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_current_user_optional] = lambda: user

    return _login


def _session_user(row):
    return {"id": row["id"], "email": row["email"], "phone": None, "name": row["full_name"], "role": row["role"]}


@pytest.fixture
def market(db):
    """
    A small marketplace: two approved vendors, one category, three products,
    a customer and an admin.
    """
    admin = db.insert_row("users", {"email": "admin@motorbuy.kw", "full_name": "Admin", "role": "admin"})
    customer = db.insert_row("users", {"email": "sara@example.com", "full_name": "Sara", "role": "customer"})
    tires_owner = db.insert_row("users", {"email": "tires@example.com", "full_name": "Tires Owner", "role": "vendor"})
    parts_owner = db.insert_row("users", {"email": "parts@example.com", "full_name": "Parts Owner", "role": "vendor"})

    tires = db.insert_row(
        "vendors",
        {"user_id": tires_owner["id"], "store_name": "Gulf Tires", "description": "Tires and rims", "is_approved": True},
    )
    parts = db.insert_row(
        "vendors",
        {
            "user_id": parts_owner["id"],
            "store_name": "Salmiya Parts",
            "description": "OEM spare parts",
            "is_approved": True,
            "commission_type": "fixed",
            "commission_value": "2",
        },
    )
    category = db.insert_row("categories", {"name": "Tires", "slug": "tires"})

    def product(vendor, name, brand, price_fils, stock=10):
        return db.insert_row(
            "products",
            {
                "vendor_id": vendor["id"],
                "category_id": category["id"],
                "name": name,
                "description": f"{brand} {name}",
                "brand": brand,
                "price_fils": price_fils,
                "stock": stock,
            },
        )

    return SimpleNamespace(
        admin=_session_user(admin),
        customer=_session_user(customer),
        tires_owner=_session_user(tires_owner),
        parts_owner=_session_user(parts_owner),
        tires=tires,
        parts=parts,
        category=category,
        tire=product(tires, "All-Season Tire 205/55R16", "Michelin", 45000),
        battery=product(parts, "Car Battery 70Ah", "Varta", 35000, stock=1),
        brake_pads=product(parts, "Brake Pads Front", "Brembo", 280000),
    )
