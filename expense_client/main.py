#!/usr/bin/env python3
"""
Command line entry point for the Expense Tracker client
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from datetime import date

from .api.models import Expense, ExpenseFilter, PaymentMethod
from .app import ExpenseClient
from .config import load_config
from .config.model import ClientConfig
from .constants import THEMES, VIEWS
from .errors.handling import log_error
from .errors.internal import ConfigError, StorageError
from .logging_config import LoggerConfigurator
from .pages.dashboard import DashboardPage

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_REDIRECTED = 2


def _prompt_confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _confirm_for(args: argparse.Namespace):
    if getattr(args, "yes", False):
        return lambda _prompt: True
    return _prompt_confirm


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category")
    parser.add_argument("--payment-method", choices=[m.value for m in PaymentMethod])
    parser.add_argument("--start-date", type=date.fromisoformat)
    parser.add_argument("--end-date", type=date.fromisoformat)
    parser.add_argument("--upi-vpa")
    parser.add_argument("--transaction-id")


def _filters_from_args(args: argparse.Namespace) -> ExpenseFilter:
    return ExpenseFilter(
        category=args.category,
        payment_method=args.payment_method,
        start_date=args.start_date,
        end_date=args.end_date,
        upi_vpa=args.upi_vpa,
        transaction_id=args.transaction_id,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="expense-client", description="Expense Tracker command line client"
    )
    parser.add_argument("--config", help="Path to the JSON configuration file")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in and store the session token")
    login.add_argument("--username", required=True)
    login.add_argument("--password")

    register = sub.add_parser("register", help="Create an account and sign in")
    register.add_argument("--username", required=True)
    register.add_argument("--email", required=True)
    register.add_argument("--password")
    register.add_argument("--confirm-password")

    logout = sub.add_parser("logout", help="Sign out and discard the session token")
    logout.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    sub.add_parser("status", help="Report whether the stored session is valid")

    list_cmd = sub.add_parser("list", help="List expenses")
    _add_filter_arguments(list_cmd)

    add = sub.add_parser("add", help="Add an expense, or update one with --id")
    add.add_argument("--id", type=int, dest="expense_id")
    add.add_argument("--amount", type=float, required=True)
    add.add_argument("--category", required=True)
    add.add_argument("--date", type=date.fromisoformat, default=None)
    add.add_argument(
        "--payment-method", choices=[m.value for m in PaymentMethod], default="CASH"
    )
    add.add_argument("--upi-vpa")
    add.add_argument("--transaction-id")
    add.add_argument("--payer-name")
    add.add_argument("--notes")

    delete = sub.add_parser("delete", help="Delete an expense")
    delete.add_argument("expense_id", type=int)
    delete.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    sub.add_parser("summary", help="Show spending totals")
    sub.add_parser("categories", help="List expense categories")

    export = sub.add_parser("export", help="Export expenses to CSV")
    export.add_argument("--dir", default=".", dest="directory")
    _add_filter_arguments(export)

    budget = sub.add_parser("budget", help="Show or set the monthly budget")
    budget.add_argument("amount", nargs="?", type=float)
    budget.add_argument("--clear", action="store_true")

    theme = sub.add_parser("theme", help="Show or change the theme")
    theme.add_argument("value", nargs="?", choices=[*THEMES, "toggle"])

    view = sub.add_parser("view", help="Show or change the expense list view")
    view.add_argument("value", nargs="?", choices=list(VIEWS))
    return parser


def print_expenses(expenses: list[Expense], view: str) -> None:
    if not expenses:
        print("No expenses found")
        return
    if view == "table":
        print(f"{'ID':>6}  {'Date':<10}  {'Category':<16}  {'Method':<6}  {'Amount':>10}")
        for e in expenses:
            print(
                f"{e.id or '-':>6}  {e.expense_date.isoformat():<10}  {e.category:<16}  "
                f"{e.payment_method.value:<6}  {e.amount:>10.2f}"
            )
        return
    for e in expenses:
        print(f"#{e.id} {e.category} {e.amount:.2f} ({e.payment_method.value})")
        print(f"    {e.expense_date.isoformat()}")
        if e.upi_vpa:
            print(f"    UPI: {e.upi_vpa} {e.transaction_id or ''}".rstrip())
        if e.notes:
            print(f"    {e.notes}")


async def _open_dashboard(
    client: ExpenseClient, confirm=None
) -> tuple[DashboardPage, int | None]:
    """Load the dashboard; the exit code is set when it did not come up."""
    page = client.dashboard_page(confirm=confirm)
    await page.on_load()
    if page.guard.is_redirecting:
        print("🔒 Not signed in. Run 'expense-client login' first.")
        return page, EXIT_REDIRECTED
    if not page.guard.is_initialized:
        return page, EXIT_FAILURE
    return page, None


async def _cmd_login(client: ExpenseClient, args: argparse.Namespace) -> int:
    page = client.auth_page()
    await page.on_load()
    if page.guard.is_redirecting:
        print(f"✅ Already signed in as {client.token_store.username()}")
        return EXIT_OK
    password = args.password or getpass.getpass("Password: ")
    response = await page.login(args.username, password)
    if response is None:
        return EXIT_FAILURE
    await page.wait_for_redirect()
    print(f"✅ Signed in as {response.username or args.username}")
    return EXIT_OK


async def _cmd_register(client: ExpenseClient, args: argparse.Namespace) -> int:
    page = client.auth_page()
    password = args.password or getpass.getpass("Password: ")
    confirm_password = args.confirm_password
    if confirm_password is None:
        confirm_password = password if args.password else getpass.getpass("Confirm password: ")
    response = await page.register(args.username, args.email, password, confirm_password)
    if response is None:
        return EXIT_FAILURE
    await page.wait_for_redirect()
    print(f"✅ Account created for {response.username or args.username}")
    return EXIT_OK


async def _cmd_logout(client: ExpenseClient, args: argparse.Namespace) -> int:
    page = client.dashboard_page(confirm=_confirm_for(args))
    if not page.logout():
        print("Logout cancelled")
        return EXIT_FAILURE
    print("👋 Signed out")
    return EXIT_OK


async def _cmd_status(client: ExpenseClient, args: argparse.Namespace) -> int:
    guard = client.new_guard("/")
    token = guard.read_token()
    if not token:
        print("❌ No stored session")
        return EXIT_REDIRECTED
    if await guard.validator.validate(token):
        print(f"✅ Session valid for {client.token_store.username() or 'unknown user'}")
        return EXIT_OK
    print(f"❌ Session invalid ({guard.validator.last_outcome.value})")
    return EXIT_REDIRECTED


async def _cmd_list(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client)
    if code is not None:
        return code
    filters = _filters_from_args(args)
    if filters.has_filters():
        await page.apply_filters(filters)
    if "expenses" in page.state.failed_loads:
        return EXIT_FAILURE
    print_expenses(page.state.expenses, page.state.view)
    return EXIT_OK


async def _cmd_add(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client)
    if code is not None:
        return code
    expense = Expense(
        amount=args.amount,
        category=args.category,
        expense_date=args.date or date.today(),
        payment_method=args.payment_method,
        upi_vpa=args.upi_vpa,
        transaction_id=args.transaction_id,
        payer_name=args.payer_name,
        notes=args.notes,
    )
    saved = await page.save_expense(expense, args.expense_id)
    if saved is None:
        return EXIT_FAILURE
    print(f"✅ Saved expense #{saved.id}")
    return EXIT_OK


async def _cmd_delete(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client, confirm=_confirm_for(args))
    if code is not None:
        return code
    return EXIT_OK if await page.delete_expense(args.expense_id) else EXIT_FAILURE


async def _cmd_summary(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client)
    if code is not None:
        return code
    summary = page.state.summary or await page.show_summary()
    if summary is None:
        return EXIT_FAILURE
    print(f"Total:        {summary.total_amount:.2f} ({summary.total_transactions} transactions)")
    print(f"Cash:         {summary.total_cash_amount:.2f}")
    print(f"UPI:          {summary.total_upi_amount:.2f}")
    for category, amount in sorted(summary.category_totals.items()):
        print(f"  {category:<16} {amount:>10.2f}")
    budget = page.state.budget
    if budget is not None and budget.budget is not None:
        print(
            f"Budget:       {budget.budget:.2f} used {budget.percent_used:.2f}% "
            f"remaining {budget.remaining:.2f}"
        )
    return EXIT_OK


async def _cmd_categories(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client)
    if code is not None:
        return code
    if "categories" in page.state.failed_loads:
        return EXIT_FAILURE
    for category in page.state.categories:
        print(category)
    return EXIT_OK


async def _cmd_export(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client)
    if code is not None:
        return code
    filters = _filters_from_args(args)
    page.state.filters = filters if filters.has_filters() else None
    target = await page.export_csv(args.directory)
    if target is None:
        return EXIT_FAILURE
    print(f"💾 {target}")
    return EXIT_OK


async def _cmd_budget(client: ExpenseClient, args: argparse.Namespace) -> int:
    page, code = await _open_dashboard(client)
    if code is not None:
        return code
    if args.clear or args.amount is not None:
        try:
            page.set_budget(None if args.clear else args.amount)
        except ValueError as e:
            print(f"❌ {e}")
            return EXIT_FAILURE
    status = page.state.budget
    if status is None or status.budget is None:
        print("No budget set")
        return EXIT_OK
    print(
        f"Budget {status.budget:.2f} spent {status.spent:.2f} "
        f"remaining {status.remaining:.2f} ({status.percent_used:.2f}%)"
    )
    return EXIT_OK


async def _cmd_theme(client: ExpenseClient, args: argparse.Namespace) -> int:
    if args.value == "toggle":
        client.preferences.toggle_theme()
    elif args.value:
        client.preferences.set_theme(args.value)
    print(client.preferences.theme)
    return EXIT_OK


async def _cmd_view(client: ExpenseClient, args: argparse.Namespace) -> int:
    if args.value:
        client.preferences.set_preferred_view(args.value)
    print(client.preferences.preferred_view)
    return EXIT_OK


COMMANDS = {
    "login": _cmd_login,
    "register": _cmd_register,
    "logout": _cmd_logout,
    "status": _cmd_status,
    "list": _cmd_list,
    "add": _cmd_add,
    "delete": _cmd_delete,
    "summary": _cmd_summary,
    "categories": _cmd_categories,
    "export": _cmd_export,
    "budget": _cmd_budget,
    "theme": _cmd_theme,
    "view": _cmd_view,
}


async def main(args: argparse.Namespace, config: ClientConfig) -> int:
    """Open the client, run one command and close it again.

    Returns:
        Process exit code.
    """
    try:
        async with ExpenseClient(config) as client:
            return await COMMANDS[args.command](client, args)
    except asyncio.CancelledError:
        raise
    except StorageError as e:
        log_error("Local state unavailable", e, context={"state_dir": config.state_dir})
        return EXIT_FAILURE
    except Exception as e:
        log_error("Command failed", e, context={"command": args.command})
        return EXIT_FAILURE


def run(argv: list[str] | None = None) -> None:
    """Synchronous entry point for the ``expense-client`` command.

    Raises:
        SystemExit: Always, carrying the command's exit code.
    """
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(EXIT_FAILURE)
    LoggerConfigurator(config.to_dict()).configure()
    try:
        code = asyncio.run(main(args, config))
    except KeyboardInterrupt:
        code = EXIT_OK
    except asyncio.CancelledError:
        code = EXIT_OK
    logging.debug(f"🏁 expense-client {args.command} finished with exit code {code}")
    sys.exit(code)


if __name__ == "__main__":
    run()
