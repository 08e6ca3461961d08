"""
Output module for pkgindex.

Provides consistent output formatting across all commands:
- JSONL (default): Newline-delimited JSON for piping
- Pretty: Human-readable tables using Rich

Usage:
    from pkgindex.output import emit, emit_error

    emit(records, pretty=pretty)
    emit_error("Not found", type="not_found", context={"package": "foo"})
"""

import json
import sys
from typing import Iterable, Any, Dict, Optional, List

from rich.console import Console
from rich.table import Table


def emit(
    items: Iterable[Any],
    pretty: bool = False,
    columns: Optional[List[str]] = None,
    title: Optional[str] = None,
) -> None:
    """
    Emit items as JSONL or pretty table.

    Args:
        items: Items to emit (should have to_dict() method or be dicts)
        pretty: If True, render as table. If False, output JSONL
        columns: Column names for table (all keys of the first item if None)
        title: Optional table title
    """
    rows = [_as_dict(item) for item in items]
    if pretty:
        _emit_table(rows, columns, title)
    else:
        for row in rows:
            print(json.dumps(row, ensure_ascii=False), flush=True)


def _as_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def _emit_table(rows: List[Dict[str, Any]], columns: Optional[List[str]], title: Optional[str]) -> None:
    console = Console()
    if not rows:
        console.print("No results found")
        return

    columns = columns or list(rows[0].keys())
    table = Table(show_header=True, header_style="bold", title=title)
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*[_format_value(row.get(col)) for col in columns])
    console.print(table)


def _format_value(value: Any) -> str:
    """Format a value for table display."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'Yes' if value else 'No'
    return str(value)


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Emit error to stderr as JSON.

    Args:
        error: Error message
        type: Error type (e.g., "not_found", "config_error")
        context: Additional context dict
    """
    obj = {
        'error': error,
        'type': type
    }
    if context:
        obj['context'] = context

    print(json.dumps(obj, ensure_ascii=False), file=sys.stderr, flush=True)
