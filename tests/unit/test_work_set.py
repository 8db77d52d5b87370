"""
Unit tests for parallel work set construction.
"""

import os

import pytest

from solr_post.core.content_filter import ContentFilter
from solr_post.core.work_set import WorkSetBuilder
from solr_post.models.ingest_models import FilterReadError


@pytest.fixture
def corpus(make_tree):
    contents = {f"doc{i:02d}.txt": f"document {i}" for i in range(40)}
    contents.update({"skip01.txt": "do not index", "skip02.txt": "DO NOT INDEX"})
    root = make_tree(contents)
    return root, sorted(os.path.join(str(root), name) for name in contents)


class TestWorkSetBuilder:
    """Test content filtering on the thread pool."""

    def test_filters_candidates(self, corpus):
        root, paths = corpus
        builder = WorkSetBuilder(ContentFilter(exclude_pattern="do not index"))

        work_set = builder.build(paths)

        assert isinstance(work_set, frozenset)
        assert len(work_set) == 40
        assert os.path.join(str(root), "skip01.txt") not in work_set

    def test_duplicate_candidates_collapse(self, corpus):
        _, paths = corpus
        builder = WorkSetBuilder(ContentFilter())

        assert builder.build(paths + paths) == frozenset(paths)

    def test_build_is_idempotent(self, corpus):
        _, paths = corpus
        builder = WorkSetBuilder(ContentFilter(include_pattern="document 1"), max_workers=4)

        first = builder.build(paths)
        second = builder.build(list(reversed(paths)))

        assert first == second
        # "document 1" and "document 10".."document 19"
        assert len(first) == 11

    def test_single_worker(self, corpus):
        _, paths = corpus
        builder = WorkSetBuilder(ContentFilter(), max_workers=1)

        assert builder.build(paths) == frozenset(paths)

    def test_no_candidates(self):
        assert WorkSetBuilder(ContentFilter()).build([]) == frozenset()

    def test_read_error_is_fatal(self, corpus, tmp_path):
        _, paths = corpus
        missing = str(tmp_path / "vanished.txt")
        builder = WorkSetBuilder(ContentFilter(), max_workers=2)

        with pytest.raises(FilterReadError) as exc_info:
            builder.build(paths + [missing])

        assert exc_info.value.path == missing
