from datetime import datetime
from typing import List, Sequence

import psycopg
from psycopg_pool import PoolTimeout

from rebank.account.model import Account
from rebank.config import config
from rebank.db import Database
from rebank.errors import MappingError, NotFoundError, ReadError, SchemaError, WriteError
from rebank.logger import get_logger

logger = get_logger(__name__)

# username and number carry no unique constraint; lookups take the first row.
CREATE_ACCOUNT_TABLE = """
    CREATE TABLE IF NOT EXISTS account (
        id SERIAL PRIMARY KEY,
        username varchar(32),
        first_name varchar(32),
        last_name varchar(32),
        encrypted_password varchar(64),
        number serial,
        balance integer,
        created_at timestamp
    )
"""

# (column, accepted type, nullable) in table order
ACCOUNT_COLUMNS = (
    ("id", int, False),
    ("username", str, True),
    ("first_name", str, True),
    ("last_name", str, True),
    ("encrypted_password", str, True),
    ("number", int, False),
    ("balance", int, True),
    ("created_at", datetime, True),
)

_DRIVER_ERRORS = (psycopg.Error, PoolTimeout)


def scan_account(row: Sequence) -> Account:
    """
    Map a row positionally onto an Account.

    Raises:
        MappingError: if the row has the wrong number of columns or a value
            of the wrong type.
    """
    if len(row) != len(ACCOUNT_COLUMNS):
        logger.error(
            "Account row has %d columns, expected %d", len(row), len(ACCOUNT_COLUMNS)
        )
        raise MappingError(
            f"account row has {len(row)} columns, expected {len(ACCOUNT_COLUMNS)}"
        )

    for value, (column, expected, nullable) in zip(row, ACCOUNT_COLUMNS):
        if value is None and nullable:
            continue
        # bool is an int subclass but never a valid integer column value
        if not isinstance(value, expected) or isinstance(value, bool):
            logger.error(
                "Account column %s has %s, expected %s",
                column,
                type(value).__name__,
                expected.__name__,
            )
            raise MappingError(
                f"account column {column} has {type(value).__name__}, "
                f"expected {expected.__name__}"
            )

    return Account(*row)


class AccountRepository:
    """
    Repository for account data access.
    Encapsulates all SQL and queries for the account table.

    Each public operation issues exactly one statement. There is no retry,
    no locking and no multi-statement transaction; concurrent callers rely
    on PostgreSQL's own concurrency control.
    """

    def __init__(self, database: Database):
        self.database = database

    @classmethod
    def connect(cls, conninfo: str = None) -> "AccountRepository":
        """
        Open and ping a connection pool.

        Falls back to the configured database URL when conninfo is omitted.

        Raises:
            DatabaseConnectionError: if the database is unreachable.
        """
        return cls(Database.open(conninfo or config.database_url))

    def initialize(self) -> None:
        """Create the account table if it does not exist. Safe to repeat."""
        try:
            self.database.execute(CREATE_ACCOUNT_TABLE)
        except _DRIVER_ERRORS as exc:
            logger.error("Failed to create account table: %s", exc)
            raise SchemaError(f"failed to create account table: {exc}") from exc
        logger.info("Account table ready")

    def close(self) -> None:
        self.database.close()

    def __enter__(self) -> "AccountRepository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Writes

    def create_account(self, account: Account) -> None:
        """
        Insert a new account and record the storage-assigned id on it.

        Any id already set on the account is ignored.
        """
        try:
            row = self.database.fetch_one(
                """
                INSERT INTO account
                    (username, first_name, last_name, encrypted_password, number, balance, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                RETURNING id
                """,
                (
                    account.username,
                    account.first_name,
                    account.last_name,
                    account.encrypted_password,
                    account.number,
                    account.balance,
                    account.created_at,
                ),
            )
        except _DRIVER_ERRORS as exc:
            logger.error("Failed to insert account %r: %s", account.username, exc)
            raise WriteError(f"failed to insert account: {exc}") from exc

        account.id = row[0]
        logger.debug("Created account id=%s number=%s", account.id, account.number)

    def update_account(self, account: Account) -> None:
        """
        Accept an update without writing anything.

        Updating is not implemented yet; the call always succeeds and the
        stored row is left unchanged.
        """
        logger.debug("update_account is a no-op (id=%s)", account.id)

    def delete_account(self, account_id: int) -> None:
        """
        Delete the account with the given id.

        Deleting an id that does not exist is not an error.
        """
        try:
            deleted = self.database.execute("DELETE FROM account WHERE id = %s", (account_id,))
        except _DRIVER_ERRORS as exc:
            logger.error("Failed to delete account id=%s: %s", account_id, exc)
            raise WriteError(f"failed to delete account {account_id}: {exc}") from exc
        logger.debug("Deleted account id=%s (%d rows)", account_id, deleted)

    # Reads

    def get_account_by_id(self, account_id: int) -> Account:
        """Get an account by its ID."""
        return self._get_one("id", account_id)

    def get_account_by_number(self, number: int) -> Account:
        """Get an account by its account number (first match wins)."""
        return self._get_one("number", number)

    def get_account_by_username(self, username: str) -> Account:
        """Get an account by username (first match wins)."""
        return self._get_one("username", username)

    def get_accounts(self) -> List[Account]:
        """List all accounts in storage order."""
        rows = self._read("SELECT * FROM account")
        return [scan_account(row) for row in rows]

    def _get_one(self, column: str, value) -> Account:
        # column is always one of the literal names above, never caller input
        row = self._read(f"SELECT * FROM account WHERE {column} = %s", (value,), one=True)
        if row is None:
            raise NotFoundError(column, value)
        return scan_account(row)

    def _read(self, query: str, params: tuple = None, one: bool = False):
        try:
            if one:
                return self.database.fetch_one(query, params)
            return self.database.fetch_all(query, params)
        except _DRIVER_ERRORS as exc:
            logger.error("Account query failed: %s", exc)
            raise ReadError(f"account query failed: {exc}") from exc
