"""
Command-line interface for carddav_sync.

Usage:
    # Show help
    carddav-sync --help

    # Write a configuration template
    carddav-sync init-config

    # List the address books on the server
    carddav-sync list-address-books

    # Run synchronization
    carddav-sync sync
    carddav-sync sync --method basic --verbose
"""

import sys
from pathlib import Path
from typing import Any

import click

from carddav_sync import __version__
from carddav_sync.config.generator import save_config_file
from carddav_sync.config.loader import ConfigError, ConfigLoader, account_from_config
from carddav_sync.contacts import list_address_books, reconcile_carddav_account
from carddav_sync.dav.transport import DEFAULT_TIMEOUT, Transport, make_transport
from carddav_sync.exceptions import CardDAVSyncError
from carddav_sync.sync.account import DEFAULT_MAX_WORKERS
from carddav_sync.sync.collection import VALID_SYNC_METHODS, SyncMethod
from carddav_sync.sync.models import Account, AddressBook
from carddav_sync.utils import DEFAULT_CONFIG_DIR, resolve_config_dir
from carddav_sync.utils.logging import cleanup_old_logs, get_logger, setup_logging

# Default configuration file
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"


def get_config_dir(config_dir: str | None) -> Path:
    """Get the configuration directory path."""
    return resolve_config_dir(config_dir)


def get_config_file(config_file: str | None, config_dir: Path) -> Path:
    """Get the configuration file path."""
    if config_file:
        return Path(config_file)
    return config_dir / "config.yaml"


def build_account(ctx: click.Context) -> tuple[Account, Transport]:
    """Build the account and transport from the loaded configuration."""
    config: dict[str, Any] = ctx.obj["config"]
    try:
        account = account_from_config(config)
    except ConfigError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    transport = make_transport(
        credentials=account.credentials,
        timeout=float(config.get("request_timeout", DEFAULT_TIMEOUT)),
    )
    return account, transport


def describe_book(address_book: AddressBook) -> str:
    """One-line label for an address book."""
    return address_book.display_name or address_book.url


@click.group()
@click.version_option(version=__version__, prog_name="carddav-sync")
@click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose output with detailed logging."
)
@click.option(
    "--config-dir",
    "-c",
    type=click.Path(exists=False, file_okay=False, dir_okay=True),
    envvar="CARDDAV_SYNC_CONFIG_DIR",
    help="Configuration directory path (default: ~/.carddav-sync).",
)
@click.option(
    "--config-file",
    "-f",
    type=click.Path(exists=False, file_okay=True, dir_okay=False),
    envvar="CARDDAV_SYNC_CONFIG_FILE",
    help="Configuration file path (default: <config-dir>/config.yaml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    config_dir: str | None,
    config_file: str | None,
) -> None:
    """
    CardDAV address book sync.

    Keeps a local copy of every address book in a CardDAV account up to
    date, using sync-collection reports where the server supports them.
    """
    ctx.ensure_object(dict)

    resolved_config_dir = get_config_dir(config_dir)
    resolved_config_file = get_config_file(config_file, resolved_config_dir)

    ctx.obj["config_dir"] = resolved_config_dir
    ctx.obj["config_file"] = resolved_config_file

    config: dict[str, Any] = {}
    try:
        loader = ConfigLoader(config_dir=resolved_config_dir)
        config = loader.load_from_file(resolved_config_file)
        if config:
            loader.validate(config)
    except ConfigError as e:
        # Don't fail here - init-config must work with a broken file
        click.echo(
            click.style(f"Warning: Configuration error: {e}", fg="yellow"), err=True
        )
        config = {}

    ctx.obj["config"] = config

    # CLI flag takes precedence over config file
    effective_verbose = verbose or config.get("verbose", False)
    ctx.obj["verbose"] = effective_verbose

    log_dir = Path(config["log_dir"]).expanduser() if config.get("log_dir") else None
    setup_logging(verbose=effective_verbose, log_dir=log_dir, enable_file_logging=True)

    log_retention = config.get("log_retention_count", 10)
    if log_retention > 0:
        cleanup_old_logs(log_dir=log_dir, keep_count=log_retention)


# =============================================================================
# Init Config Command
# =============================================================================


@cli.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite existing configuration file if it exists.",
)
@click.pass_context
def init_config_command(ctx: click.Context, force: bool) -> None:
    """
    Generate a default configuration file.

    Examples:

        carddav-sync init-config

        carddav-sync init-config --force
    """
    logger = get_logger(__name__)
    config_file = ctx.obj["config_file"]

    click.echo(f"Creating configuration file: {config_file}")

    success, error = save_config_file(config_file, overwrite=force)

    if success:
        click.echo(click.style("Configuration file created successfully!", fg="green"))
        click.echo(f"\nLocation: {config_file}")
        click.echo("\nNext steps:")
        click.echo("1. Set root_url and your credentials")
        click.echo("2. Run 'carddav-sync list-address-books' to check the connection")
    else:
        click.echo(click.style(f"Error: {error}", fg="red"), err=True)
        logger.error(f"Failed to create configuration file: {error}")
        sys.exit(1)


# =============================================================================
# List Address Books Command
# =============================================================================


@cli.command("list-address-books")
@click.pass_context
def list_address_books_command(ctx: click.Context) -> None:
    """
    List the address books in the account's home set.

    Shows each book's URL, current ctag and whether it supports
    incremental (sync-collection) sync.
    """
    logger = get_logger(__name__)
    account, transport = build_account(ctx)

    try:
        address_books = list_address_books(account, transport)
    except CardDAVSyncError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        logger.debug("Discovery failed", exc_info=True)
        sys.exit(1)

    if not address_books:
        click.echo(f"No address books found at {account.home_url}")
        return

    click.echo(f"Address books at {account.home_url}:")
    for address_book in address_books:
        ctag = address_book.data.props.get("getctag") if address_book.data else None
        incremental = "yes" if address_book.supports_sync_collection() else "no"
        click.echo(f"\n  {describe_book(address_book)}")
        click.echo(f"    URL:          {address_book.url}")
        click.echo(f"    ctag:         {ctag or '-'}")
        click.echo(f"    Incremental:  {incremental}")
        if address_book.reports:
            click.echo(f"    Reports:      {', '.join(sorted(address_book.reports))}")


# =============================================================================
# Sync Command
# =============================================================================


@cli.command("sync")
@click.option(
    "--method",
    "-m",
    type=click.Choice(sorted(VALID_SYNC_METHODS), case_sensitive=False),
    default=None,
    help="Sync method (default: auto, or sync_method from the config file).",
)
@click.option(
    "--workers",
    "-w",
    type=click.IntRange(min=1),
    default=None,
    help=f"Address books synced in parallel (default: {DEFAULT_MAX_WORKERS}).",
)
@click.pass_context
def sync_command(ctx: click.Context, method: str | None, workers: int | None) -> None:
    """
    Synchronize every address book in the account.

    Address books that fail to sync are dropped from this run and reported;
    the others still complete.

    Examples:

        carddav-sync sync

        carddav-sync sync --method basic
    """
    logger = get_logger(__name__)
    config = ctx.obj["config"]
    account, transport = build_account(ctx)

    effective_method = SyncMethod(method or config.get("sync_method", "auto"))
    effective_workers = workers or config.get("max_workers", DEFAULT_MAX_WORKERS)

    click.echo(f"Syncing {account.home_url} ({effective_method.value})...")

    try:
        report = reconcile_carddav_account(
            account,
            transport,
            sync_method=effective_method,
            max_workers=effective_workers,
        )
    except CardDAVSyncError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        logger.debug("Sync failed", exc_info=True)
        sys.exit(1)

    for address_book in report.synced:
        stats = address_book.last_sync_stats
        summary = stats.summary() if stats else "up to date"
        click.echo(
            f"  {describe_book(address_book)}: "
            f"{len(address_book.objects)} cards ({summary})"
        )

    for address_book, error in report.evicted:
        click.echo(
            click.style(f"  {describe_book(address_book)}: failed - {error}", fg="red"),
            err=True,
        )

    if report.has_failures:
        click.echo(
            click.style(
                f"Sync finished with {len(report.evicted)} failed address book(s).",
                fg="yellow",
            )
        )
    else:
        click.echo(click.style("Sync complete.", fg="green"))


# =============================================================================
# Health Command
# =============================================================================


@cli.command("health")
def health_command() -> None:
    """
    Check application health status.

    Example:

        carddav-sync health
    """
    click.echo("healthy")
