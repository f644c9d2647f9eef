"""
Utility functions for formatting text-based reports and tables.

Provides consistent table formatting for weighting and ranking reports.
"""

from typing import Any, List, Optional


class Column:
    """Column definition for table formatting."""

    def __init__(self, name: str, width: int, align: str = "<", precision: Optional[int] = None):
        """
        Args:
            name: Column header name
            width: Column width in characters
            align: Alignment ('<' left, '>' right, '^' center)
            precision: Decimal places for float values (None leaves values as-is)
        """
        self.name = name
        self.width = width
        self.align = align
        self.precision = precision

    def format_header(self) -> str:
        """Format column header with alignment."""
        return f"{self.name:{self.align}{self.width}}"

    def format_value(self, value: Any) -> str:
        """Format column value with alignment, truncating text that overflows the column."""
        if self.precision is not None and isinstance(value, float):
            text = f"{value:.{self.precision}f}"
        else:
            text = str(value)
        if len(text) > self.width:
            text = text[: max(self.width - 1, 0)] + "…"
        return f"{text:{self.align}{self.width}}"


class TableFormatter:
    """Builder for formatted text tables with aligned columns."""

    def __init__(self, columns: List[Column], total_width: Optional[int] = None):
        """
        Args:
            columns: List of Column definitions
            total_width: Total report width for separators (defaults to the sum of column widths)
        """
        self.columns = columns
        self.total_width = total_width or sum(col.width for col in columns) + len(columns) - 1
        self.lines: List[str] = []

    def add_section_header(self, title: str) -> "TableFormatter":
        """Add section header with top/bottom separator lines."""
        self.lines.append("=" * self.total_width)
        self.lines.append(title)
        self.lines.append("=" * self.total_width)
        return self

    def add_table_header(self) -> "TableFormatter":
        """Add table header row with column names."""
        self.lines.append(" ".join(col.format_header() for col in self.columns))
        return self

    def add_separator(self, char: str = "-") -> "TableFormatter":
        """Add horizontal separator line."""
        self.lines.append(char * self.total_width)
        return self

    def add_row(self, values: List[Any]) -> "TableFormatter":
        """
        Add data row with column values.

        Raises:
            ValueError: If number of values doesn't match columns
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")

        self.lines.append(" ".join(col.format_value(val) for col, val in zip(self.columns, values)))
        return self

    def add_summary(self, text: str) -> "TableFormatter":
        """Add summary line (typically after table data)."""
        self.lines.append(f"\n{text}")
        return self

    def render(self) -> str:
        """Render accumulated lines to string."""
        return "\n".join(self.lines)


def format_flags(**flags: bool) -> str:
    """
    Render boolean flags as a compact marker string.

    Example:
        format_flags(recent=True, relevant=False, keyword=True)
        # "recent,keyword"
    """
    active = [name for name, enabled in flags.items() if enabled]
    return ",".join(active) if active else "-"
