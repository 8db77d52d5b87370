"""
Input validation utilities for CLI commands
"""

import os
import re
from pathlib import Path
from typing import List, Optional, Tuple

import httpx
from rich.console import Console


def validate_directory(directory: str) -> Tuple[bool, Optional[str], Optional[Path]]:
    """
    Validate the directory to scan

    Returns:
        (is_valid, error_message, resolved_path)
    """
    path = Path(directory).expanduser()

    if not path.exists():
        return False, f"Directory does not exist: {path}", None

    if not path.is_dir():
        return False, f"Path exists but is not a directory: {path}", None

    if not os.access(path, os.R_OK | os.X_OK):
        return False, f"No read permission for directory: {path}", None

    return True, None, path


def validate_concurrency_limit(concurrency: int) -> Tuple[bool, Optional[str]]:
    """
    Validate concurrency limit

    Returns:
        (is_valid, error_message)
    """
    if concurrency < 1:
        return False, "Concurrency must be at least 1"

    return True, None


def validate_regex(pattern: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a content pattern

    Returns:
        (is_valid, error_message)
    """
    try:
        re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        return False, f"Invalid regex pattern '{pattern}': {e}"

    return True, None


def validate_update_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an explicit Solr update URL

    Returns:
        (is_valid, error_message)
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        return False, f"Malformed URL '{url}': {e}"

    if parsed.scheme not in ("http", "https") or not parsed.host:
        return False, f"Malformed URL '{url}': expected an absolute http(s) URL"

    return True, None


def show_validation_error(
    console: Console, error_message: str, suggestions: Optional[List[str]] = None
) -> None:
    """
    Display validation error with helpful suggestions
    """
    console.print(f"[red]Validation Error:[/red] {error_message}")

    if suggestions:
        console.print("\n[yellow]Suggestions:[/yellow]")
        for suggestion in suggestions:
            console.print(f"  • {suggestion}")


def get_validation_suggestions(error_type: str, value: str) -> List[str]:
    """
    Get validation suggestions based on error type
    """
    suggestions = []

    if error_type == "directory":
        suggestions.extend(
            [
                "Check the path for typos",
                "Use an absolute path to avoid confusion",
                f"List the directory to confirm it exists: ls {value}",
            ]
        )

    elif error_type == "concurrency":
        suggestions.extend(
            [
                "Use a positive integer (default is 8)",
                "Lower values reduce load on the Solr server",
            ]
        )

    elif error_type == "regex":
        suggestions.extend(
            [
                "Escape special characters such as '.', '(', '[' with a backslash",
                "Matching is case-insensitive, no inline flags needed",
                "Quote the pattern in your shell",
            ]
        )

    elif error_type == "url":
        suggestions.extend(
            [
                "Include the scheme, e.g. http://localhost:8983/solr/my_collection/update/extract",
                "Or drop --url and use --host, --port and --collection",
            ]
        )

    return suggestions
