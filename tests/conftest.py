"""
Pytest configuration and fixtures.
"""

import pytest
from sqlalchemy import create_engine

from page_resolver.models.data_structures import DomainRow, PageRow
from page_resolver.processing.hierarchy_index import build_index
from page_resolver.utils.config_loader import ENV_DSN, ENV_LOG_LEVEL, Config


# (uid, pid, is_siteroot, title)
SAMPLE_PAGES = [
    (1, 0, 1, "Home"),
    (2, 1, 0, "About"),
    (3, 2, 0, "Team"),
    (4, 1, 0, "Contact"),
    (10, 0, 1, "Shop"),
    (11, 10, 0, "Cart"),
    (20, 0, 1, "Intranet"),
    (21, 20, 0, "Wiki"),
]

# (pid, domainName, forced, sorting)
SAMPLE_DOMAINS = [
    (1, "example.com", 0, 1),
    (1, "www.example.com", 0, 2),
    (10, "shop.example.org", 0, 1),
    (10, "store.example.org", 1, 2),
]


def create_pages_database(path, pages, domains) -> str:
    """Create a SQLite file with pages and sys_domain tables.

    Returns:
        SQLAlchemy URL of the new database.
    """
    dsn = f"sqlite:///{path}"
    engine = create_engine(dsn)
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "CREATE TABLE pages ("
            "uid INTEGER PRIMARY KEY, "
            "pid INTEGER NOT NULL, "
            "is_siteroot INTEGER NOT NULL DEFAULT 0, "
            "title VARCHAR(255))"
        )
        conn.exec_driver_sql(
            "CREATE TABLE sys_domain ("
            "uid INTEGER PRIMARY KEY AUTOINCREMENT, "
            "pid INTEGER NOT NULL, "
            "domainName VARCHAR(255) NOT NULL, "
            "forced INTEGER NOT NULL DEFAULT 0, "
            "sorting INTEGER NOT NULL DEFAULT 0)"
        )
        if pages:
            conn.exec_driver_sql(
                "INSERT INTO pages (uid, pid, is_siteroot, title) "
                "VALUES (?, ?, ?, ?)",
                list(pages),
            )
        if domains:
            conn.exec_driver_sql(
                "INSERT INTO sys_domain (pid, domainName, forced, sorting) "
                "VALUES (?, ?, ?, ?)",
                list(domains),
            )
    engine.dispose()
    return dsn


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep resolver environment variables out of every test."""
    monkeypatch.delenv(ENV_DSN, raising=False)
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)


@pytest.fixture
def pages_db_factory(tmp_path):
    """Return a function creating a SQLite pages database per call."""
    counter = {"n": 0}

    def _factory(pages=SAMPLE_PAGES, domains=SAMPLE_DOMAINS) -> str:
        counter["n"] += 1
        return create_pages_database(
            tmp_path / f"pages_{counter['n']}.db", pages, domains
        )

    return _factory


@pytest.fixture
def sample_dsn(pages_db_factory):
    """DSN of a database holding the sample site tree."""
    return pages_db_factory()


@pytest.fixture
def cyclic_dsn(pages_db_factory):
    """DSN of a database where pages 5 and 6 are each other's parent."""
    return pages_db_factory(
        pages=SAMPLE_PAGES + [(5, 6, 0, "Loop A"), (6, 5, 0, "Loop B")]
    )


@pytest.fixture
def sample_index():
    """Hierarchy index over the sample site tree, built without a database."""
    page_rows = [PageRow(uid, pid, bool(flag)) for uid, pid, flag, _ in SAMPLE_PAGES]
    domain_rows = [
        DomainRow(pid, name, bool(forced)) for pid, name, forced, _ in SAMPLE_DOMAINS
    ]
    return build_index(page_rows, domain_rows)


@pytest.fixture
def test_config():
    """Default configuration without environment overrides."""
    return Config.load(use_env=False)


# Markers for different test categories
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: Tests that run the resolver against a database"
    )
