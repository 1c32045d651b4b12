import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..core.database import async_session_maker, close_db, init_db
from ..core.logging_config import configure_logging
from ..features.auth import service as auth_service
from ..features.auth.models import User as AuthUser
from ..features.auth.security import get_password_hash
from ..features.reports import service as report_service
from ..features.reports.exceptions import ReportError

logger = logging.getLogger(__name__)

app = typer.Typer(name="home-inventory", help="CLI for managing Home Inventory data and reports.")


# Shared async context manager for database connection
class DBConnection:
    async def __aenter__(self):
        await init_db()  # Create tables if they don't exist
        self.session = async_session_maker()
        return self.session

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.session.close()
        await close_db()


# User management commands
user_app = typer.Typer(name="users", help="Manage user accounts.")
app.add_typer(user_app)


@user_app.command("create")
def create_user_command(
    username: str = typer.Option(..., prompt=True, help="Username for the new account."),
    email: str = typer.Option(..., prompt=True, help="Email for the new account."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True, help="Password for the new account.")
):
    """Creates a new user account."""
    asyncio.run(_create_user(username, email, password))


async def _create_user(username: str, email: str, password: str):
    async with DBConnection() as db:
        typer.echo(f"Attempting to create user: {username} ({email})...")
        if await auth_service.get_user_by_username(db, username):
            typer.secho(f"Error: User with username '{username}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        if await auth_service.get_user_by_email(db, email):
            typer.secho(f"Error: User with email '{email}' already exists.", fg=typer.colors.RED)
            raise typer.Exit(code=1)

        try:
            user = await auth_service.create_user(
                db,
                user_in={"username": username, "email": email},
                hashed_password_val=get_password_hash(password),
            )
        except IntegrityError as e:
            typer.secho(f"Error creating user: {e.orig}", fg=typer.colors.RED)
            raise typer.Exit(code=1)
        typer.secho(f"User '{user.username}' created successfully with ID: {user.id}", fg=typer.colors.GREEN)


# Report commands
report_app = typer.Typer(name="reports", help="Generate inventory reports.")
app.add_typer(report_app)


@report_app.command("export")
def export_report_command(
    username: str = typer.Argument(..., help="Generate the report as this user."),
    format: str = typer.Option("json", "--format", "-f", help="json or csv"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout."),
    inventory_id: Optional[str] = typer.Option(None, help="Only include items from this inventory."),
    category: Optional[str] = typer.Option(None, help="Exact category to match."),
    location: Optional[str] = typer.Option(None, help="Case-insensitive substring of the item location."),
    from_date: Optional[str] = typer.Option(None, help="Earliest purchase date (YYYY-MM-DD)."),
    to_date: Optional[str] = typer.Option(None, help="Latest purchase date (YYYY-MM-DD)."),
    min_price: Optional[str] = typer.Option(None, help="Lowest purchase price."),
    max_price: Optional[str] = typer.Option(None, help="Highest purchase price."),
    sort_by: Optional[str] = typer.Option(None, help="name, price, date, category or created."),
    sort_order: Optional[str] = typer.Option(None, help="asc or desc."),
):
    """Generates an inventory report for a user and writes it out."""
    params = {
        "inventory_id": inventory_id,
        "category": category,
        "location": location,
        "from_date": from_date,
        "to_date": to_date,
        "min_price": min_price,
        "max_price": max_price,
        "sort_by": sort_by,
        "sort_order": sort_order,
        "format": format,
    }
    asyncio.run(_export_report(username, params, output))


async def _export_report(username: str, params: dict, output: Optional[Path]):
    try:
        request = report_service.parse_report_request(params)
    except ReportError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    async with DBConnection() as db:
        user = await auth_service.get_user_by_username(db, username)
        if user is None:
            typer.secho(f"Error: User with username '{username}' not found.", fg=typer.colors.RED)
            raise typer.Exit(code=1)

        try:
            rendered = await report_service.export_inventory_report(db, user, request)
        except ReportError as e:
            typer.secho(f"Error: {e.message}", fg=typer.colors.RED)
            raise typer.Exit(code=1)

    if output is None:
        sys.stdout.buffer.write(rendered.content)
        sys.stdout.buffer.flush()
        return
    output.write_bytes(rendered.content)
    typer.secho(f"Report written to {output}", fg=typer.colors.GREEN)


@app.command("test-db-connection")
def test_db_connection_command_sync():
    """Tests the database connection and counts user accounts."""
    asyncio.run(test_db_connection_command())


async def test_db_connection_command():
    async with DBConnection() as db:
        typer.echo("Successfully connected to the database.")
        try:
            user_count = await db.scalar(select(func.count()).select_from(AuthUser))
        except SQLAlchemyError as e:
            typer.echo(f"Error querying users: {e}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Found {user_count} user(s) in the database.")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stdout.")):
    if verbose:
        configure_logging(level="DEBUG")


if __name__ == "__main__":
    app()
