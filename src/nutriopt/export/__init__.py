"""Output formatters."""

from nutriopt.export.formatters import (
    JSONFormatter,
    MarkdownFormatter,
    TableFormatter,
    format_result,
)

__all__ = ["TableFormatter", "JSONFormatter", "MarkdownFormatter", "format_result"]
