"""Tests for report renderers."""

import io
import json

from execlens_cli.render import JsonRenderer, TextRenderer, basename
from execlens_core.explain import ActionDiff, FileClassification
from execlens_store.models import ActionRecord, FileRecord

C = FileClassification


def _record(seconds=0.5, cache_hit=False):
    return ActionRecord(
        identity_label="//pkg:lib",
        progress_message="Building pkg/liblib.jar",
        inputs=(FileRecord("pkg/A.java", b"1"), FileRecord("pkg/B.java", b"2")),
        outputs=(FileRecord("out/liblib.jar", b"3"),),
        wall_time_seconds=seconds,
        cache_hit=cache_hit,
    )


def _diff(inputs=None, outputs=None, has_history=True, **kwargs):
    return ActionDiff(
        identity="//pkg:lib|Building pkg/liblib.jar",
        record=_record(**kwargs),
        has_history=has_history,
        input_classifications=inputs or {},
        output_classifications=outputs or {},
    )


def _renderer(**kwargs):
    stream = io.StringIO()
    return TextRenderer(stream, color=False, **kwargs), stream


def test_basename():
    assert basename("a/b/c.txt") == "c.txt"
    assert basename("c.txt") == "c.txt"


class TestTextRenderer:
    def test_no_history_line(self):
        renderer, _ = _renderer()
        line = renderer.format_line(_diff(has_history=False)).plain
        assert line == "   0.50      2->   1 Building pkg/liblib.jar [no history]"

    def test_cache_hit_marker(self):
        renderer, _ = _renderer()
        line = renderer.format_line(_diff(has_history=False, cache_hit=True)).plain
        assert line.startswith("   0.50 C    2->")

    def test_change_markers_in_order(self):
        renderer, _ = _renderer()
        diff = _diff(
            inputs={"pkg/B.java": C.CHANGED_DIGEST, "pkg/Old.java": C.REMOVED, "pkg/New.java": C.ADDED},
            outputs={"out/liblib.jar": C.CHANGED_DIGEST},
        )
        line = renderer.format_line(diff).plain
        assert line.endswith("Building pkg/liblib.jar B.java -Old.java +New.java -> liblib.jar")

    def test_unchanged_sides(self):
        renderer, _ = _renderer()
        line = renderer.format_line(_diff()).plain
        assert line.endswith("[unchanged] -> [unchanged]")

    def test_seconds_style(self):
        renderer, _ = _renderer()
        for seconds, style in ((1.0, "green"), (10.0, "yellow"), (150.0, "red")):
            text = renderer.format_line(_diff(has_history=False, seconds=seconds))
            assert text.spans[0].style == style

    def test_suppressible_diff_not_rendered(self):
        renderer, stream = _renderer()
        assert renderer.render(_diff(cache_hit=True)) is False
        assert stream.getvalue() == ""

    def test_show_cached_renders_suppressible(self):
        renderer, stream = _renderer(show_cached=True)
        assert renderer.render(_diff(cache_hit=True)) is True
        assert "[unchanged]" in stream.getvalue()

    def test_details(self):
        renderer, stream = _renderer(details=True)
        renderer.render(_diff(inputs={"pkg/B.java": C.CHANGED_DIGEST, "pkg/New.java": C.ADDED}))
        lines = stream.getvalue().splitlines()
        assert lines[1:] == ["    pkg/B.java", "    + pkg/New.java"]

    def test_header(self):
        renderer, stream = _renderer()
        renderer.header()
        assert "seconds num_inputs->num_outputs build action changed_inputs -> changed_outputs" in stream.getvalue()

    def test_no_ansi_when_color_disabled(self):
        renderer, stream = _renderer()
        renderer.render(_diff(has_history=False))
        assert "\x1b[" not in stream.getvalue()

    def test_ansi_when_color_forced(self, monkeypatch):
        monkeypatch.setenv("TERM", "xterm-256color")
        monkeypatch.delenv("NO_COLOR", raising=False)
        stream = io.StringIO()
        TextRenderer(stream, color=True).render(_diff(has_history=False))
        assert "\x1b[" in stream.getvalue()


class TestJsonRenderer:
    def test_renders_json_line(self):
        stream = io.StringIO()
        JsonRenderer(stream).render(_diff(inputs={"pkg/New.java": C.ADDED}))
        data = json.loads(stream.getvalue())
        assert data["inputs"] == {"pkg/New.java": "added"}
        assert data["outputs"] == {}
        assert data["num_inputs"] == 2
        assert data["suppressible"] is False

    def test_suppressible_skipped(self):
        stream = io.StringIO()
        assert JsonRenderer(stream).render(_diff(cache_hit=True)) is False
        assert stream.getvalue() == ""
