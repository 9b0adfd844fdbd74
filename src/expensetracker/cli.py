"""Command line entry point for managing categories and expenses."""

from __future__ import annotations

from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .errors import ConnectivityError
from .logging_config import setup_logging
from .models.expense import PaymentMethod
from .services.tracker import ActionResult

PAYMENT_CHOICES = click.Choice([method.name for method in PaymentMethod], case_sensitive=False)


def _report(result: ActionResult) -> None:
    """Echo an action result and exit non-zero on failure."""

    if result.ok:
        click.echo(result.message)
        return
    click.echo(result.message, err=True)
    for field, messages in result.errors.items():
        for message in messages:
            click.echo(f"  {field}: {message}", err=True)
    raise SystemExit(1)


def _load(app: AppContext) -> None:
    result = app.tracker.refresh()
    if not result.ok:
        _report(result)


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Record spending by category and payment method."""

    config = ctx.obj if isinstance(ctx.obj, BaseConfig) else BaseConfig()
    setup_logging(config)
    try:
        app = create_app_context(config)
    except ConnectivityError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(1) from exc
    ctx.call_on_close(app.dispose)
    ctx.obj = app


@cli.command("init-db")
@click.pass_obj
def init_db(app: AppContext) -> None:
    """Create the schema if it does not exist yet."""

    click.echo(f"Database ready: {app.engine.url.render_as_string()}")


@cli.group()
def category() -> None:
    """Manage categories."""


@category.command("list")
@click.pass_obj
def category_list(app: AppContext) -> None:
    _load(app)
    categories = app.tracker.categories.items
    if not categories:
        click.echo("No categories.")
        return
    for item in categories:
        click.echo(f"{item.id}\t{item.name}\t{item.description or ''}")


@category.command("add")
@click.argument("name")
@click.argument("description")
@click.pass_obj
def category_add(app: AppContext, name: str, description: str) -> None:
    _load(app)
    _report(app.tracker.add_category({"name": name, "description": description}))


@category.command("update")
@click.argument("category_id", type=int)
@click.option("--name", default=None)
@click.option("--description", default=None)
@click.pass_obj
def category_update(
    app: AppContext, category_id: int, name: Optional[str], description: Optional[str]
) -> None:
    _load(app)
    current = app.tracker.find_category(category_id)
    data = {
        "name": name if name is not None else getattr(current, "name", ""),
        "description": description if description is not None else getattr(current, "description", ""),
    }
    _report(app.tracker.update_category(category_id, data))


@category.command("delete")
@click.argument("category_id", type=int)
@click.pass_obj
def category_delete(app: AppContext, category_id: int) -> None:
    _load(app)
    _report(app.tracker.delete_category(category_id))


@cli.group()
def expense() -> None:
    """Manage expenses."""


@expense.command("list")
@click.pass_obj
def expense_list(app: AppContext) -> None:
    _load(app)
    rows = app.tracker.expense_table()
    if not rows:
        click.echo("No expenses.")
        return
    for row in rows:
        click.echo(
            f"{row.id}\t{row.expense_date}\t{row.category}\t{row.payment_method}\t"
            f"{row.amount}\t{row.description}"
        )


@expense.command("add")
@click.option("--category-id", type=int, required=True)
@click.option("--amount", required=True)
@click.option("--method", "payment_method", type=PAYMENT_CHOICES, required=True)
@click.option("--description", required=True)
@click.option("--date", "expense_date", default="", help="YYYY-MM-DD, defaults to now")
@click.pass_obj
def expense_add(
    app: AppContext,
    category_id: int,
    amount: str,
    payment_method: str,
    description: str,
    expense_date: str,
) -> None:
    _load(app)
    _report(
        app.tracker.add_expense(
            {
                "category_id": category_id,
                "amount": amount,
                "payment_method": payment_method.upper(),
                "description": description,
                "expense_date": expense_date,
            }
        )
    )


@expense.command("update")
@click.argument("expense_id", type=int)
@click.option("--category-id", type=int, default=None)
@click.option("--amount", default=None)
@click.option("--method", "payment_method", type=PAYMENT_CHOICES, default=None)
@click.option("--description", default=None)
@click.option("--date", "expense_date", default=None)
@click.pass_obj
def expense_update(
    app: AppContext,
    expense_id: int,
    category_id: Optional[int],
    amount: Optional[str],
    payment_method: Optional[str],
    description: Optional[str],
    expense_date: Optional[str],
) -> None:
    _load(app)
    current = app.tracker.find_expense(expense_id)
    if current is None:
        _report(app.tracker.update_expense(expense_id, {}))
        return
    data = {
        "category_id": category_id if category_id is not None else current.category_id,
        "amount": amount if amount is not None else current.amount,
        "payment_method": payment_method.upper() if payment_method else current.payment_method,
        "description": description if description is not None else current.description,
        "expense_date": expense_date if expense_date is not None else current.expense_date.isoformat(),
    }
    _report(app.tracker.update_expense(expense_id, data))


@expense.command("delete")
@click.argument("expense_id", type=int)
@click.pass_obj
def expense_delete(app: AppContext, expense_id: int) -> None:
    _load(app)
    _report(app.tracker.delete_expense(expense_id))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
