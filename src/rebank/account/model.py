import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

# Account numbers handed out by Account.new() when the caller has none.
MAX_ACCOUNT_NUMBER = 1_000_000


@dataclass
class Account:
    """
    A bank account record as stored in the account table.

    Field order matches the table's column order.
    """

    id: Optional[int]
    username: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    encrypted_password: Optional[str]
    number: int
    balance: Optional[int]
    created_at: Optional[datetime]

    @classmethod
    def new(
        cls,
        username: str,
        first_name: str,
        last_name: str,
        encrypted_password: str,
        number: int = None,
        balance: int = 0,
    ) -> "Account":
        """
        Build an unsaved account stamped with the current UTC time.

        The password must already be encrypted; it is stored as given.
        """
        if number is None:
            number = random.randrange(MAX_ACCOUNT_NUMBER)
        return cls(
            id=None,
            username=username,
            first_name=first_name,
            last_name=last_name,
            encrypted_password=encrypted_password,
            number=number,
            balance=balance,
            # The column is a plain timestamp, so store naive UTC
            created_at=datetime.now(timezone.utc).replace(tzinfo=None),
        )
