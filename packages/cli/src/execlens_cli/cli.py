"""CLI entry point for execlens.

Commands:
  explain  — compare every action in an execution log with the previous run
  show     — display the stored history entry for one action
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from execlens_cli.commands.explain import explain_cmd
from execlens_cli.commands.show import show_cmd


def _build_store(config: dict):
    """Instantiate the configured history store from .execlens.yml settings.

    Store selection hierarchy:
      store: sqlite → SQLiteHistoryStore (store_path or .execlens/history.db)
      store: memory → MemoryHistoryStore (history discarded on exit)
      (default)     → FileHistoryStore   (history_dir, or <output_base>/execlog_history)

    This factory lives in cli.py so neither execlens_core nor execlens_store
    know about the CLI config format.
    """
    store_type = config.get("store", "file")

    if store_type == "sqlite":
        from execlens_store.sqlite import SQLiteHistoryStore

        return SQLiteHistoryStore(db_path=config.get("store_path", ".execlens/history.db"))

    if store_type == "memory":
        from execlens_store.memory import MemoryHistoryStore

        return MemoryHistoryStore()

    from execlens_core.config import resolve_history_dir
    from execlens_store.filesystem import FileHistoryStore

    return FileHistoryStore(resolve_history_dir(config))


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("execlens"),
    prog_name="execlens",
)
@click.option(
    "--config",
    "config_path",
    default=".execlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="EXECLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Explain why build actions re-ran by diffing them against the previous build."""
    from execlens_core.config import load_config

    _setup_logging(verbose)
    ctx.ensure_object(dict)

    try:
        config = load_config(config_path)
    except (ValueError, OSError) as e:
        raise click.UsageError(f"Could not load {config_path}: {e}")

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(explain_cmd)
main.add_command(show_cmd)
