"""
Output format utilities for gitremote CLI commands.

Provides functions to format result dicts as JSON, JSONL, YAML, CSV and TSV.
"""

import csv
import io
import json
import os
from typing import Any, Dict, Iterable, Iterator, List, Optional

import yaml

FORMATS = ('jsonl', 'json', 'yaml', 'csv', 'tsv')


def format_output(data: Iterable[Dict[str, Any]], format: str,
                  fields: Optional[List[str]] = None) -> Iterator[str]:
    """
    Format data according to the specified format.

    Args:
        data: Dictionaries to format
        format: Output format (json, jsonl, csv, tsv, yaml)
        fields: Optional list of columns (for CSV/TSV)

    Yields:
        Formatted strings for output
    """
    if format == "jsonl":
        for item in data:
            yield json.dumps(item, ensure_ascii=False)
    elif format == "json":
        yield json.dumps(list(data), ensure_ascii=False, indent=2)
    elif format == "yaml":
        yield yaml.safe_dump(list(data), default_flow_style=False,
                             allow_unicode=True, sort_keys=False)
    elif format == "csv":
        yield from format_delimited(data, ',', fields)
    elif format == "tsv":
        yield from format_delimited(data, '\t', fields)
    else:
        raise ValueError(f"Unknown format: {format}")


def format_delimited(data: Iterable[Dict[str, Any]], delimiter: str,
                     fields: Optional[List[str]] = None) -> Iterator[str]:
    """Format data as CSV/TSV, flattening nested dicts into dotted columns."""
    rows = [flatten_dict(item) for item in data]
    if not rows:
        return

    if fields is None:
        # Keep first-seen column order across rows
        fields = list(dict.fromkeys(key for row in rows for key in row))

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=fields, delimiter=delimiter,
                            extrasaction='ignore', lineterminator='\n')
    writer.writeheader()
    writer.writerows(rows)
    yield output.getvalue().rstrip('\n')


def flatten_dict(d: Dict[str, Any], parent_key: str = '', sep: str = '.') -> Dict[str, Any]:
    """
    Flatten a nested dictionary.

    Example:
        {'errors': {'latest_tag': 'no versions present'}}
            -> {'errors.latest_tag': 'no versions present'}
    """
    items: Dict[str, Any] = {}
    for k, v in d.items():
        key = f"{parent_key}{sep}{k}" if parent_key else k
        if isinstance(v, dict):
            items.update(flatten_dict(v, key, sep=sep))
        elif v is None:
            items[key] = ''
        else:
            items[key] = v
    return items


def get_format_from_env(default: str = 'jsonl') -> str:
    """
    Get output format from the GITREMOTE_FORMAT environment variable.

    Falls back to default when unset or unknown.
    """
    format = os.environ.get('GITREMOTE_FORMAT', default).lower()
    if format not in FORMATS + ('table',):
        return default
    return format
