#!/usr/bin/env python3
"""Operator tool for initializing the schema and inspecting accounts."""

import argparse

from rich.console import Console
from rich.table import Table

from rebank.account import Account, AccountRepository
from rebank.errors import NotFoundError, RepositoryError

console = Console()


def build_table(accounts: list[Account]) -> Table:
    """Render accounts as a rich table. Passwords are never shown."""
    table = Table(title="Accounts")
    table.add_column("ID", justify="right")
    table.add_column("Number", justify="right")
    table.add_column("Username")
    table.add_column("Name")
    table.add_column("Balance", justify="right")
    table.add_column("Created")
    for a in accounts:
        table.add_row(
            str(a.id),
            str(a.number),
            a.username or "",
            f"{a.first_name or ''} {a.last_name or ''}".strip(),
            str(a.balance),
            a.created_at.isoformat(sep=" ") if a.created_at else "",
        )
    return table


def init_db(repo: AccountRepository, args) -> None:
    repo.initialize()
    console.print("[green]Account table ready.[/]")


def list_accounts(repo: AccountRepository, args) -> None:
    accounts = repo.get_accounts()
    if not accounts:
        console.print("[red]No accounts found.[/]")
        return
    console.print(build_table(accounts))


def show_account(repo: AccountRepository, args) -> None:
    try:
        if args.id is not None:
            account = repo.get_account_by_id(args.id)
        elif args.number is not None:
            account = repo.get_account_by_number(args.number)
        else:
            account = repo.get_account_by_username(args.username)
    except NotFoundError as exc:
        console.print(f"[red]{exc}[/]")
        return
    console.print(build_table([account]))


def main():
    parser = argparse.ArgumentParser(description="rebank account store")
    parser.add_argument("--database-url", help="Override the configured connection string")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the account table if missing")
    subparsers.add_parser("list-accounts", help="List all accounts")
    show = subparsers.add_parser("show-account", help="Look up a single account")
    key = show.add_mutually_exclusive_group(required=True)
    key.add_argument("--id", type=int)
    key.add_argument("--number", type=int)
    key.add_argument("--username")

    args = parser.parse_args()

    commands = {
        "init-db": init_db,
        "list-accounts": list_accounts,
        "show-account": show_account,
    }

    try:
        with AccountRepository.connect(args.database_url) as repo:
            commands[args.command](repo, args)
    except RepositoryError as exc:
        console.print(f"[red]{exc}[/]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
