"""
Account

This module provides the account record and its repository.
"""

from rebank.account.model import Account
from rebank.account.repository import AccountRepository

__all__ = ["Account", "AccountRepository"]
