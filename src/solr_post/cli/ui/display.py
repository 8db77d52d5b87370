"""
Rich display components for configuration and errors
"""

from typing import Any, Dict, Optional

from rich.panel import Panel
from rich.table import Table


def create_config_table(
    config_data: Dict[str, Any], title: str = "Configuration"
) -> Table:
    """
    Create a Rich table for configuration display
    """
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="green")
    table.add_column("Source", style="yellow")

    for key, value_info in config_data.items():
        if isinstance(value_info, dict):
            value = value_info.get("value")
            source = value_info.get("source", "unknown")
        else:
            value = value_info
            source = "config file"

        if value is None or value == "":
            display_value = "not set"
        elif any(sensitive in key.lower() for sensitive in ["password", "user"]):
            # credentials are "user:pass"; keep the user name visible
            display_value = f"{str(value).split(':', 1)[0]}:***masked***"
        elif isinstance(value, (list, tuple)):
            display_value = ",".join(str(v) for v in value)
        else:
            display_value = str(value)

        table.add_row(key, display_value, source)

    return table


def create_error_display(error: Exception, context: Optional[str] = None) -> Panel:
    """
    Create formatted error display with suggestions
    """
    error_lines = []

    if context:
        error_lines.append(f"Context: {context}")
        error_lines.append("")

    error_lines.append(f"Error: {str(error)}")
    error_lines.append("")

    error_type = type(error).__name__.lower()
    message = str(error).lower()
    suggestions = []

    if "filterread" in error_type or "permission" in message:
        suggestions.extend(
            [
                "Check read permissions on the files being indexed",
                "Make sure no files are being removed while the scan runs",
                "Narrow the scan with --file-extensions or --glob",
            ]
        )

    elif "connect" in message or "clientsetup" in error_type:
        suggestions.extend(
            [
                "Check that the Solr server is running",
                "Verify --host/--port or --url",
                "Try with reduced concurrency: --concurrency 2",
            ]
        )

    elif "config" in error_type or "config" in message:
        suggestions.extend(
            [
                "Check configuration: solr-post config show",
                "Regenerate defaults: solr-post config init --force",
                "Verify SOLR_POST_* environment variables",
            ]
        )

    else:
        suggestions.extend(
            [
                "Run with --verbose for detailed error information",
                "Verify configuration: solr-post config show",
            ]
        )

    error_lines.append("Suggestions:")
    for suggestion in suggestions:
        error_lines.append(f"  • {suggestion}")

    return Panel(
        "\n".join(error_lines),
        title="[red]Error[/red]",
        border_style="red",
        padding=(1, 2),
    )
