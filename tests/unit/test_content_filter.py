"""
Unit tests for content-based admission.
"""

import random

import pytest

from solr_post.core.content_filter import ContentFilter
from solr_post.models.ingest_models import CandidateFile, FilterReadError


def candidate(text: str) -> CandidateFile:
    return CandidateFile(path="doc.txt", content=text.encode("utf-8"))


class TestDecisionTable:
    """Exclude is checked first, include second."""

    @pytest.mark.parametrize(
        "exclude,include,text,expected",
        [
            (None, None, "anything at all", True),
            ("secret", None, "this is TOP SECRET", False),
            ("secret", None, "public notes", True),
            (None, "solr", "About Solr indexing", True),
            (None, "solr", "about lucene", False),
            ("draft", "solr", "solr DRAFT", False),
            ("draft", "solr", "solr final", True),
            ("draft", "solr", "lucene final", False),
        ],
    )
    def test_decision(self, exclude, include, text, expected):
        content_filter = ContentFilter(exclude_pattern=exclude, include_pattern=include)
        assert content_filter.accepts(candidate(text)) is expected

    def test_no_rules(self):
        assert ContentFilter().has_rules is False

    def test_empty_include_pattern_is_a_rule(self):
        content_filter = ContentFilter(include_pattern="")

        assert content_filter.has_rules is True
        assert content_filter.accepts(candidate("whatever")) is True

    def test_exclude_precedence_over_random_contents(self):
        """No content matching the exclude pattern is ever accepted."""
        rng = random.Random(1234)
        vocabulary = ["solr", "lucene", "index", "draft", "SECRET", "final", "Solr"]
        content_filter = ContentFilter(exclude_pattern="secret", include_pattern="solr")

        for _ in range(200):
            words = rng.choices(vocabulary, k=rng.randint(0, 6))
            text = " ".join(words)
            lowered = text.lower()
            expected = "secret" not in lowered and "solr" in lowered
            assert content_filter.accepts(candidate(text)) is expected, text

    def test_multiline_content(self):
        content_filter = ContentFilter(include_pattern="^keep$")
        # without MULTILINE the anchors apply to the whole content
        assert content_filter.accepts(candidate("first\nkeep\nlast")) is False
        assert content_filter.accepts(candidate("keep")) is True


class TestLoading:
    """Test reading candidate files."""

    def test_load_reads_bytes(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"hello")

        loaded = ContentFilter().load(str(path))

        assert loaded.path == str(path)
        assert loaded.content == b"hello"

    def test_invalid_utf8_still_evaluated(self, tmp_path):
        path = tmp_path / "a.bin"
        path.write_bytes(b"\xff\xfe solr \x80")

        assert ContentFilter(include_pattern="solr").admit(str(path)) is True

    def test_unreadable_file_raises(self, tmp_path):
        missing = tmp_path / "gone.txt"

        with pytest.raises(FilterReadError) as exc_info:
            ContentFilter().admit(str(missing))

        assert exc_info.value.path == str(missing)
