"""Shared test fixtures for the db2file test suite."""

from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from db2file.converter import Converter
from db2file.database import DatabaseKind

PRODUCTS = [
    {"id": 1, "name": "Pen", "price": 1.5, "note": None},
    {"id": 2, "name": "Salt & Pepper", "price": 3.25, "note": "kitchen"},
    {"id": 3, "name": "Notebook", "price": 4.0, "note": "A & B & C"},
]


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sqlite_path(tmp_path) -> Path:
    """SQLite database file holding a three row `products` table."""
    path = tmp_path / "shop.db"
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE products ("
                "id INTEGER PRIMARY KEY, name TEXT, price REAL, note TEXT)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO products (id, name, price, note) "
                "VALUES (:id, :name, :price, :note)"
            ),
            PRODUCTS,
        )
        conn.execute(text("CREATE TABLE empty_table (id INTEGER, label TEXT)"))
    engine.dispose()
    return path


@pytest.fixture
def converter(sqlite_path):
    """Converter connected to the sample database."""
    conv = Converter(DatabaseKind.SQLITE, str(sqlite_path))
    yield conv
    conv.close()


# ---------------------------------------------------------------------------
# Configuration fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def project_root(tmp_path, sqlite_path) -> Path:
    """Project directory with config/config.toml and two connection files."""
    root = tmp_path / "project"
    connections = root / "config" / "connections"
    connections.mkdir(parents=True)
    (root / "pyproject.toml").write_text("[project]\nname = 'sample'\n")
    (root / "config" / "config.toml").write_text(
        '[paths]\nconnections = "connections"\n\n'
        '[output]\ntable_element = "products"\nrow_element = "product"\n'
    )
    (connections / "local.toml").write_text(
        "[connections.shop]\n"
        'kind = "sqlite"\n'
        f'database = "{sqlite_path.as_posix()}"\n'
    )
    (connections / "remote.toml").write_text(
        "[connections.warehouse]\n"
        'kind = "postgres"\n'
        'database = "warehouse"\n'
        'host = "localhost"\n'
        'username = "reader"\n'
        'password = "${WAREHOUSE_PASSWORD}"\n'
        "\n"
        "[connections.warehouse.options]\n"
        "connect_timeout = 10\n"
        "\n"
        "[connections.warehouse.production]\n"
        'host = "warehouse.internal"\n'
        'password = "${WAREHOUSE_PROD_PASSWORD}"\n'
    )
    return root
