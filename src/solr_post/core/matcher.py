"""
Recursive file discovery driven by brace-expanded glob expressions.
"""

import logging
import os
import stat
from pathlib import Path
from typing import List, Union

from ..models.config_models import InclusionRule, compile_inclusion_patterns
from ..models.ingest_models import ConfigurationError, ScanError

logger = logging.getLogger(__name__)


class FileMatcher:
    """
    Enumerates candidate files below a root directory.

    Entry-level failures (unreadable directories, dangling symlinks) are
    logged and collected in ``scan_errors``; they never abort the scan.
    """

    def __init__(self, rule: InclusionRule):
        self.rule = rule
        self.expression = rule.expression
        self._matchers = compile_inclusion_patterns(self.expression)
        self.scan_errors: List[ScanError] = []

    def matches(self, relative_path: str) -> bool:
        """Check a POSIX-style path relative to the scan root."""
        return any(m.match(relative_path) for m in self._matchers)

    def scan(self, root: Union[str, Path]) -> List[str]:
        """
        Walk ``root`` recursively and return the matching file paths.

        Args:
            root: Directory to scan

        Returns:
            Paths (root-joined) of every matching regular file

        Raises:
            ConfigurationError: If the root does not exist or is not a directory
        """
        root_str = os.fspath(root)
        if not os.path.isdir(root_str):
            raise ConfigurationError(f"Scan root is not a directory: {root_str}")

        self.scan_errors = []
        matched: List[str] = []

        def on_walk_error(error: OSError) -> None:
            self._record_error(error.filename or root_str, error)

        logger.debug(f"Scanning {root_str} for '{self.expression}'")

        for dirpath, _dirnames, filenames in os.walk(root_str, onerror=on_walk_error):
            for filename in filenames:
                path = os.path.join(dirpath, filename)
                relative = Path(os.path.relpath(path, root_str)).as_posix()
                if not self.matches(relative):
                    continue

                # follows symlinks, so a dangling link fails here
                try:
                    file_stat = os.stat(path)
                except OSError as e:
                    self._record_error(path, e)
                    continue

                if stat.S_ISREG(file_stat.st_mode):
                    matched.append(path)

        logger.info(
            f"Scan of {root_str} matched {len(matched)} files "
            f"({len(self.scan_errors)} entry errors)"
        )
        return matched

    def _record_error(self, path: str, error: OSError) -> None:
        scan_error = ScanError(path=str(path), message=error.strerror or str(error))
        self.scan_errors.append(scan_error)
        logger.warning(f"error: {scan_error}")
