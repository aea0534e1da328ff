import json
import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import OUTPUT_MODES, settings
from diary import ResultSet

EMPTY_TABLE_MESSAGE = "Table is empty"
NULL_TEXT = "NULL"

_console = Console()


def get_output_mode() -> str:
    mode = (settings.output_mode or "").lower().strip()
    # Unknown values fall back to plain
    return mode if mode in OUTPUT_MODES else "plain"


def tolerate_undecodable_input() -> None:
    """Replace undecodable console bytes instead of failing the whole read."""
    reconfigure = getattr(sys.stdin, "reconfigure", None)
    if callable(reconfigure):
        reconfigure(errors="replace")


def promptline(label: str) -> Optional[str]:
    """Read one line after printing ``<label> > ``. Returns None at end of input."""
    try:
        line = input(f"{label} > ")
    except EOFError:
        return None
    return line.rstrip("\r\n")


def _cell(value: Optional[str]) -> str:
    return NULL_TEXT if value is None else value


def print_rows(result: ResultSet) -> None:
    """Print every column of every row in the current output mode.
    - plain: columns joined with '; ', one line per row
    - json: JSON array of objects keyed by column name
    - rich: Rich table headed by the column names
    """
    if not result.rows:
        # Same message in every mode
        print(EMPTY_TABLE_MESSAGE)
        return

    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(result.as_dicts(), ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        for index, column in enumerate(result.columns):
            if index == 0:
                table.add_column(escape(column), style="magenta", no_wrap=True)
            else:
                table.add_column(escape(column), style="white")
        for row in result.rows:
            table.add_row(*(escape(_cell(value)) for value in row))
        _console.print(table)
    else:
        for row in result.rows:
            print("; ".join(_cell(value) for value in row))
