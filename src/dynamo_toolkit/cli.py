"""Command line interface for DynamoDB Toolkit."""

import sys
from collections.abc import Iterable
from json import dumps
from logging import DEBUG, WARNING, basicConfig, getLogger
from sys import stdout
from typing import Literal

from cyclopts import App
from cyclopts.config import Env
from migrate import (
    DynamoDestination,
    MigrationError,
    MigrationOptions,
    RelationalSource,
    TableOutcome,
    dynamodb,
    migrate_database,
    mysql,
    translate,
)
from migrate.destination import MAX_BATCH_SIZE
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

app = App(
    help="Migrate MySQL tables to DynamoDB",
    config=Env("DYNAMO_TOOLKIT_", command=False),
)


type Format = Literal["table", "json"]


console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def configure_logging(*, verbose: bool) -> None:
    """Route log records through rich on stderr."""
    basicConfig(
        level=WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    if verbose:
        getLogger("migrate").setLevel(DEBUG)


def validate_batch_size(batch_size: int) -> None:
    """Validate batch size against the BatchWriteItem limit."""
    if not 1 <= batch_size <= MAX_BATCH_SIZE:
        print_error(f"Batch size must be between 1 and {MAX_BATCH_SIZE}")
        sys.exit(1)


def format_outcome_table(outcomes: Iterable[TableOutcome]) -> None:
    """Format migration outcomes as a rich table."""
    table = Table(title="Migration Results")
    table.add_column("Table", style="bold cyan")
    table.add_column("Items", justify="right")
    table.add_column("Batches", justify="right")
    table.add_column("Unprocessed", justify="right", style="bold yellow")
    table.add_column("Status")

    for outcome in outcomes:
        if outcome.result is None:
            table.add_row(outcome.table, "-", "-", "-", "[red]failed[/]")
            continue
        table.add_row(
            outcome.table,
            str(outcome.result.items),
            str(outcome.result.batches),
            str(outcome.result.unprocessed),
            "[green]ok[/]",
        )

    console.print(table)


@app.command
def migrate(  # noqa: PLR0913
    *,
    database: str,
    table: str | None = None,
    mysql_host: str = "localhost",
    mysql_port: int = 3306,
    mysql_username: str = "root",
    mysql_password: str = "root",  # noqa: S107
    prefix_with_database: bool = False,
    prefix_separator: str = "_",
    tinyint_as_bool: bool = False,
    force_pk_as_string: bool = False,
    create_table: bool = False,
    batch_size: int = 25,
    continue_on_error: bool = False,
    region: str | None = None,
    endpoint_url: str | None = None,
    verbose: bool = False,
) -> None:
    """Migrate MySQL tables to DynamoDB.

    Args:
        database: MySQL database to be read from
        table: Table to migrate, if omitted all tables will be migrated
        mysql_host: MySQL hostname
        mysql_port: MySQL port number
        mysql_username: MySQL username
        mysql_password: MySQL password
        prefix_with_database: Use database as prefix for DynamoDB table name
        prefix_separator: Separator if prefix is used
        tinyint_as_bool: Convert tinyint to bool
        force_pk_as_string: Convert PK to string
        create_table: Create DynamoDB table if missing
        batch_size: Items per BatchWriteItem request
        continue_on_error: Carry on with the next table when one fails
        region: AWS region of the DynamoDB tables
        endpoint_url: DynamoDB endpoint, e.g. for DynamoDB Local
        verbose: Log progress details

    """
    configure_logging(verbose=verbose)
    validate_batch_size(batch_size)

    source = RelationalSource(
        mysql(mysql_host, mysql_port, mysql_username, mysql_password, database),
    )
    destination = DynamoDestination(dynamodb(region, endpoint_url))
    options = MigrationOptions(
        table=table,
        prefix_with_database=prefix_with_database,
        prefix_separator=prefix_separator,
        tinyint_as_bool=tinyint_as_bool,
        force_pk_as_string=force_pk_as_string,
        create_table=create_table,
        batch_size=batch_size,
        continue_on_error=continue_on_error,
    )
    print_info(f"Source: mysql://{mysql_host}:{mysql_port}/{database}")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=err_console,
        ) as progress:
            progress.add_task("Migrating tables...", total=None)
            outcomes = migrate_database(source, destination, options)
    except MigrationError as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Migration interrupted by user")
        sys.exit(1)

    format_outcome_table(outcomes)

    failures = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failures:
        print_error(f"{outcome.table}: {outcome.error}")
    if failures:
        sys.exit(1)

    print_success(f"Migrated {len(outcomes)} tables successfully")


@app.command
def schema(  # noqa: PLR0913
    *,
    database: str,
    table: str | None = None,
    mysql_host: str = "localhost",
    mysql_port: int = 3306,
    mysql_username: str = "root",
    mysql_password: str = "root",  # noqa: S107
    tinyint_as_bool: bool = False,
    force_pk_as_string: bool = False,
    fmt: Format = "table",
) -> None:
    """Show the DynamoDB attributes MySQL tables translate to.

    Args:
        database: MySQL database to be read from
        table: Table to translate, if omitted all tables will be translated
        mysql_host: MySQL hostname
        mysql_port: MySQL port number
        mysql_username: MySQL username
        mysql_password: MySQL password
        tinyint_as_bool: Convert tinyint to bool
        force_pk_as_string: Convert PK to string
        fmt: Output format

    """
    source = RelationalSource(
        mysql(mysql_host, mysql_port, mysql_username, mysql_password, database),
    )

    try:
        tables = [table] if table else source.list_tables()
        schemas = {
            name: translate(
                source.list_columns(name),
                tinyint_as_bool=tinyint_as_bool,
                force_pk_as_string=force_pk_as_string,
            )
            for name in tables
        }
    except MigrationError as e:
        print_error(str(e))
        sys.exit(1)

    if fmt == "json":
        stdout.write(
            dumps(
                {
                    name: [
                        {
                            "name": attribute.name,
                            "type": attribute.attribute_type.name,
                            "primary_key": attribute.primary_key,
                        }
                        for attribute in attributes
                    ]
                    for name, attributes in schemas.items()
                },
            ),
        )
        return

    for name, attributes in schemas.items():
        output = Table(title=name)
        output.add_column("Attribute", style="bold cyan")
        output.add_column("Type")
        output.add_column("Key", style="bold yellow")
        for attribute in attributes:
            output.add_row(
                attribute.name,
                attribute.attribute_type.name,
                "HASH" if attribute.primary_key else "",
            )
        console.print(output)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
