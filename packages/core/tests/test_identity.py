"""Tests for action identity normalization."""

import logging

import pytest

from execlens_core.identity import normalize, normalize_message, strip_jar_source_count
from execlens_store.errors import MalformedRecordError


class TestStripJarSourceCount:
    def test_strips_source_count(self):
        assert strip_jar_source_count("Building foo/bar.jar (12 source files)") == "Building foo/bar.jar"

    def test_strips_everything_from_first_paren(self):
        message = "Building pkg/lib.jar (20 source files, 3 source jars) and running annotation processors (X)"
        assert strip_jar_source_count(message) == "Building pkg/lib.jar"

    def test_ignores_non_jar_builds(self):
        assert strip_jar_source_count("Building foo/bar.so (3 objects)") is None

    def test_ignores_other_verbs(self):
        assert strip_jar_source_count("Compiling foo/bar.jar (12 source files)") is None

    def test_ignores_jar_without_suffix(self):
        assert strip_jar_source_count("Building foo/bar.jar") is None


class TestNormalize:
    def test_source_count_variants_share_identity(self):
        a = normalize("//foo:bar", "Building foo/bar.jar (12 source files)")
        b = normalize("//foo:bar", "Building foo/bar.jar (15 source files, 2 jars)")
        assert a == b

    def test_identity_combines_label_and_message(self):
        assert normalize("//foo:bar", "Linking foo/bar") == "//foo:bar|Linking foo/bar"

    def test_different_labels_differ(self):
        assert normalize("//a", "Linking x") != normalize("//b", "Linking x")

    def test_different_messages_differ(self):
        assert normalize("//a", "Compiling a.cc") != normalize("//a", "Compiling b.cc")

    def test_unrecognized_message_used_verbatim(self):
        assert normalize("//a", "Executing genrule (3 files)") == "//a|Executing genrule (3 files)"

    def test_missing_label_raises(self):
        with pytest.raises(MalformedRecordError, match="no identity label"):
            normalize("", "Building foo/bar.jar")

    def test_empty_message_allowed(self):
        assert normalize("//a", "") == "//a|"

    def test_custom_normalizers(self):
        def drop_digits(message):
            return "".join(c for c in message if not c.isdigit())

        assert normalize("//a", "Run 12 tests", normalizers=[drop_digits]) == "//a|Run  tests"

    def test_first_matching_normalizer_wins(self):
        normalizers = [lambda m: None, lambda m: "second", lambda m: "third"]
        assert normalize_message("anything", normalizers) == "second"


def test_unstripped_parenthesized_message_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="execlens_core.identity"):
        normalize_message("Executing genrule (3 files)")
    assert "may be unstable" in caplog.text


def test_plain_message_not_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="execlens_core.identity"):
        normalize_message("Linking foo/bar")
    assert caplog.text == ""
