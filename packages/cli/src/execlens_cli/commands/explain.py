"""explain command — diff each action of an execution log against history."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console

from execlens_cli.render import JsonRenderer, TextRenderer
from execlens_core.execlog import ExeclogFormatError, read_execlog
from execlens_core.explain import Explainer
from execlens_store.errors import HistoryWriteError, MalformedRecordError

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _make_renderer(fmt: str, stream, color: bool, details: bool, show_cached: bool):
    if fmt == "json":
        return JsonRenderer(stream or sys.stdout, show_cached=show_cached)
    return TextRenderer(stream, color=color, details=details, show_cached=show_cached)


@click.command("explain")
@click.argument("execlog", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", "output", type=click.File("w", encoding="utf-8", lazy=False), default=None,
              help="Write the report to this file instead of stdout.")
@click.option("--format", "fmt", type=click.Choice(["text", "json"]), default=None,
              help="Report format. Overrides config file.")
@click.option("--details", is_flag=True, help="List the full path of every changed file.")
@click.option("--show-cached", is_flag=True,
              help="Also show remote cache hits that have no detected change.")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.pass_context
def explain_cmd(ctx, execlog: str, output, fmt: str | None, details: bool,
                show_cached: bool, no_color: bool):
    """Explain why each action in EXECLOG was executed.

    Every action is compared with the same action from the previous build
    and then recorded as the baseline for the next one. The first build on a
    workspace reports every action as [no history].
    """
    config = ctx.obj["config"]
    store = ctx.obj["store"]
    for key, value in (("format", fmt), ("details", details), ("show_cached", show_cached)):
        if value:
            config[key] = value
    color = config.get("color", True) and not no_color

    try:
        renderer = _make_renderer(config["format"], output, color, config["details"], config["show_cached"])
        renderer.header()
        explainer = Explainer(store)
        shown = total = 0
        for diff in explainer.explain_all(read_execlog(execlog)):
            total += 1
            if renderer.render(diff):
                shown += 1
    except (MalformedRecordError, ExeclogFormatError) as e:
        raise click.ClickException(f"Malformed execution log {execlog}: {e}")
    except HistoryWriteError as e:
        raise click.ClickException(f"Explanation aborted, history could not be saved: {e}")

    logger.debug("Explained %d actions, %d shown", total, shown)
    if output is not None:
        console.print(f"Wrote explanation of {total} actions ({shown} shown) to '{output.name}'")
