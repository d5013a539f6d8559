# src/rebank/conftest.py
"""
Pytest configuration and shared fixtures for integration tests.

Tests are co-located with implementation files using the *_test.py suffix.
Integration tests need a PostgreSQL server reachable through the test
configuration (.env.test or DB_* / DATABASE_URL variables); they are
skipped when none is available.
"""

import os

# Set environment BEFORE importing any app modules
os.environ["REBANK_ENV"] = "test"

from datetime import datetime

import psycopg
import pytest
from psycopg import sql
from psycopg.conninfo import conninfo_to_dict, make_conninfo

from rebank.account import Account, AccountRepository
from rebank.config import config
from rebank.db import Database


def _test_database_url() -> str:
    """The configured URL, forced onto a database whose name ends in _test."""
    db_name = conninfo_to_dict(config.database_url).get("dbname") or "rebank"
    if not db_name.endswith("_test"):
        db_name = f"{db_name}_test"
    return make_conninfo(config.database_url, dbname=db_name)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_db():
    """
    Create the test database and schema once per test session.

    This fixture:
    1. Drops the test database if it exists (clean slate)
    2. Creates a fresh test database
    3. Creates the account table

    Runs once at the start of the test session.
    """
    test_db_url = _test_database_url()
    db_name = conninfo_to_dict(test_db_url)["dbname"]
    base_url = make_conninfo(test_db_url, dbname="postgres")

    try:
        admin = psycopg.connect(base_url, autocommit=True, connect_timeout=5)
    except psycopg.OperationalError as exc:
        pytest.skip(f"PostgreSQL not available: {exc}")

    with admin:
        with admin.cursor() as cur:
            # Terminate existing connections to test database
            cur.execute(
                """
                SELECT pg_terminate_backend(pg_stat_activity.pid)
                FROM pg_stat_activity
                WHERE pg_stat_activity.datname = %s
                AND pid <> pg_backend_pid()
                """,
                (db_name,),
            )
            cur.execute(sql.SQL("DROP DATABASE IF EXISTS {}").format(sql.Identifier(db_name)))
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(db_name)))

    with psycopg.connect(test_db_url) as conn:
        AccountRepository(Database.attach(conn)).initialize()
        conn.commit()

    yield test_db_url


@pytest.fixture
def db_connection(test_db):
    """
    Provide a database connection with transaction rollback.

    Each test runs in a transaction that is rolled back at the end,
    ensuring tests don't affect each other.
    """
    conn = psycopg.connect(test_db)

    # Clean slate: truncate before each test
    with conn.cursor() as cur:
        cur.execute("TRUNCATE account RESTART IDENTITY")
    conn.commit()

    yield conn

    # Rollback any changes made during the test
    conn.rollback()
    conn.close()


@pytest.fixture
def db_cursor(db_connection):
    """Provide a cursor for direct SQL operations in tests."""
    with db_connection.cursor() as cur:
        yield cur


# =============================================================================
# Repository Fixtures
# =============================================================================


@pytest.fixture
def account_repo(db_connection):
    """Provide an AccountRepository bound to the test transaction."""
    return AccountRepository(Database.attach(db_connection))


# =============================================================================
# Seed Data Fixtures
# =============================================================================


def make_account(**overrides) -> Account:
    """Build an unsaved account with predictable values."""
    fields = {
        "id": None,
        "username": "alice",
        "first_name": "Alice",
        "last_name": "A",
        "encrypted_password": "$2a$10$abcdefghijklmnopqrstuv",
        "number": 1001,
        "balance": 100,
        "created_at": datetime(2024, 1, 15, 9, 30, 0),
    }
    fields.update(overrides)
    return Account(**fields)


@pytest.fixture
def account_factory():
    """Provide the make_account builder to tests."""
    return make_account


@pytest.fixture
def sample_account(account_repo) -> Account:
    """Create a single stored account."""
    account = make_account()
    account_repo.create_account(account)
    return account


@pytest.fixture
def sample_accounts(account_repo) -> list[Account]:
    """Create multiple stored accounts."""
    accounts = [
        make_account(username="alice", first_name="Alice", last_name="A", number=1001, balance=100),
        make_account(username="bob", first_name="Bob", last_name="B", number=1002, balance=250),
        make_account(username="carol", first_name="Carol", last_name="C", number=1003, balance=0),
    ]
    for account in accounts:
        account_repo.create_account(account)
    return accounts
