"""Report renderers for ActionDiff streams.

Renderers only consume ActionDiff values; classification lives in
execlens_core.explain. Two formats:

  text — one colored line per action (rich markup), optionally followed by
         the full paths of every changed file
  json — one JSON object per action (JSON lines)
"""

from __future__ import annotations

import json
from typing import IO, TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from execlens_core.explain import FileClassification

if TYPE_CHECKING:
    from execlens_core.explain import ActionDiff

_MARKERS = {
    FileClassification.CHANGED_DIGEST: "",
    FileClassification.REMOVED: "-",
    FileClassification.ADDED: "+",
}


def basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _seconds_style(seconds: float) -> str:
    if seconds >= 100:
        return "red"
    if seconds >= 10:
        return "yellow"
    return "green"


class TextRenderer:
    """Renders the human-readable explanation report.

    Line format:
      seconds [C] num_inputs->num_outputs progress message changed_inputs -> changed_outputs
    """

    def __init__(self, stream: IO[str] | None = None, color: bool = True, details: bool = False,
                 show_cached: bool = False):
        self.console = Console(
            file=stream,
            force_terminal=color if stream is not None else None,
            no_color=not color,
            highlight=False,
            soft_wrap=True,
        )
        self.details = details
        self.show_cached = show_cached

    def header(self) -> None:
        self.console.print("This file lists the build actions executed using the following format:")
        line = Text()
        line.append("seconds", style="green")
        line.append(" num_inputs", style="cyan")
        line.append("->", style="bright_black")
        line.append("num_outputs", style="magenta")
        line.append(" build action")
        line.append(" changed_inputs", style="cyan")
        line.append(" ->", style="bright_black")
        line.append(" changed_outputs", style="magenta")
        self.console.print(line)
        self.console.print()

    def render(self, diff: ActionDiff) -> bool:
        """Print one action. Returns False when the diff was suppressed."""
        if diff.suppressible and not self.show_cached:
            return False
        self.console.print(self.format_line(diff))
        if self.details and diff.has_history:
            for line in self.format_details(diff):
                self.console.print(line)
        return True

    def format_line(self, diff: ActionDiff) -> Text:
        record = diff.record
        line = Text()
        line.append(f"{record.wall_time_seconds:7.2f}", style=_seconds_style(record.wall_time_seconds))
        line.append(f" {'C' if record.cache_hit else ' '}")
        line.append(f"{len(record.inputs):5d}", style="cyan")
        line.append("->", style="bright_black")
        line.append(f"{len(record.outputs):4d} ", style="magenta")
        line.append(record.progress_message)

        if not diff.has_history:
            line.append(" [no history]", style="yellow")
            return line

        self._append_changes(line, diff.input_classifications, "cyan")
        line.append(" ->", style="bright_black")
        self._append_changes(line, diff.output_classifications, "magenta")
        return line

    def format_details(self, diff: ActionDiff) -> list[Text]:
        lines = []
        for classifications, style in ((diff.input_classifications, "cyan"), (diff.output_classifications, "magenta")):
            for path, kind in classifications.items():
                marker = _MARKERS[kind]
                lines.append(Text(f"    {marker + ' ' if marker else ''}{path}", style=style))
        return lines

    @staticmethod
    def _append_changes(line: Text, classifications: dict[str, FileClassification], style: str) -> None:
        if not classifications:
            line.append(" [unchanged]", style="yellow")
            return
        for path, kind in classifications.items():
            line.append(f" {_MARKERS[kind]}{basename(path)}", style=style)


class JsonRenderer:
    """Renders each ActionDiff as one JSON line."""

    def __init__(self, stream: IO[str], show_cached: bool = False):
        self.stream = stream
        self.show_cached = show_cached

    def header(self) -> None:
        pass  # JSON lines carry no header

    def render(self, diff: ActionDiff) -> bool:
        if diff.suppressible and not self.show_cached:
            return False
        self.stream.write(json.dumps(self.to_dict(diff)) + "\n")
        return True

    @staticmethod
    def to_dict(diff: ActionDiff) -> dict:
        record = diff.record
        return {
            "identity": diff.identity,
            "label": record.identity_label,
            "progress_message": record.progress_message,
            "mnemonic": record.mnemonic,
            "wall_time_seconds": record.wall_time_seconds,
            "cache_hit": record.cache_hit,
            "num_inputs": len(record.inputs),
            "num_outputs": len(record.outputs),
            "has_history": diff.has_history,
            "suppressible": diff.suppressible,
            "total_changed_inputs": diff.total_changed_inputs,
            "total_changed_outputs": diff.total_changed_outputs,
            "inputs": {path: kind.value for path, kind in diff.input_classifications.items()},
            "outputs": {path: kind.value for path, kind in diff.output_classifications.items()},
        }
