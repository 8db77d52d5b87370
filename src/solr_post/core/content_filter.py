"""
Content-based admission rules for candidate files.
"""

import logging
import re
from typing import Optional

from ..models.config_models import compile_content_pattern
from ..models.ingest_models import CandidateFile, FilterReadError

logger = logging.getLogger(__name__)


class ContentFilter:
    """
    Decides whether a candidate file enters the work set.

    Patterns are matched case-insensitively against the whole file content.
    The exclude pattern is checked first and takes precedence: a file that
    matches it is rejected even if it also matches the include pattern.
    """

    def __init__(
        self,
        exclude_pattern: Optional[str] = None,
        include_pattern: Optional[str] = None,
    ):
        self.exclude_regex: Optional[re.Pattern[str]] = (
            compile_content_pattern(exclude_pattern)
            if exclude_pattern is not None
            else None
        )
        self.include_regex: Optional[re.Pattern[str]] = (
            compile_content_pattern(include_pattern)
            if include_pattern is not None
            else None
        )

    @property
    def has_rules(self) -> bool:
        return self.exclude_regex is not None or self.include_regex is not None

    def load(self, path: str) -> CandidateFile:
        """
        Read a candidate's full content.

        Raises:
            FilterReadError: If the file cannot be read
        """
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise FilterReadError(f"Failed to read {path}: {e}", path=path) from e
        return CandidateFile(path=path, content=content)

    def accepts(self, candidate: CandidateFile) -> bool:
        """Apply the exclude/include decision table to loaded content."""
        if not self.has_rules:
            return True

        text = candidate.text

        if self.exclude_regex is not None and self.exclude_regex.search(text):
            logger.debug(f"excluded by content: {candidate.path}")
            return False

        if self.include_regex is not None and not self.include_regex.search(text):
            logger.debug(f"not included by content: {candidate.path}")
            return False

        return True

    def admit(self, path: str) -> bool:
        """Read ``path`` and decide whether it is admitted."""
        return self.accepts(self.load(path))
