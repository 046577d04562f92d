"""Library for formatting command output as tables or yaml documents."""

from collections.abc import Generator
import sys
from typing import Any, TextIO

import yaml

PADDING = 4

EMPTY = "-"


def column_format_string(rows: list[list[str]]) -> str:
    """Produce a format string based on max width of columns."""
    num_cols = len(rows[0])
    widths = [0] * num_cols
    for row in rows:
        for i, value in enumerate(row):
            widths[i] = max(widths[i], len(value))
    return "".join([f"{{:{w+PADDING}}}" for w in widths])


def format_columns(
    headers: list[str], rows: list[list[str]]
) -> Generator[str, None, None]:
    """Print the specified output rows in a column format."""
    data = [headers] + rows
    format_string = column_format_string(data)
    if format_string:
        for row in data:
            yield format_string.format(*row)


def format_value(value: Any, empty: str = EMPTY) -> str:
    """Render a single cell, using a placeholder for missing values."""
    if value is None or value == "" or value == []:
        return empty
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return str(value)


class PrintFormatter:
    """A formatter that prints a table of rows for the console."""

    def __init__(self, keys: list[str] | None = None, empty: str = EMPTY) -> None:
        """Initialize the PrintFormatter.

        Args:
            keys: The columns to print, defaulting to the keys of the first row.
            empty: Placeholder printed for empty values.
        """
        self._keys = keys
        self._empty = empty

    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        """Format the data objects."""
        if not data:
            return
        keys = self._keys if self._keys is not None else list(data[0])
        rows = [
            [format_value(row.get(key), self._empty) for key in keys] for row in data
        ]
        yield from format_columns([key.upper() for key in keys], rows)

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Output the data objects."""
        for result in self.format(data):
            print(result, file=file)


class YamlFormatter:
    """A formatter that prints a stream of yaml documents."""

    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        """Format the data objects."""
        yield from self._dump(data).split("\n")

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Output the data objects."""
        print(self._dump(data), end="", file=file)

    @staticmethod
    def _dump(data: list[dict[str, Any]]) -> str:
        return yaml.dump_all(data, sort_keys=False, explicit_start=True)
