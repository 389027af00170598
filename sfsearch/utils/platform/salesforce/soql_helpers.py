"""Helper functions for SOQL and SOSL query building."""

import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional

_OBJECT_NAME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9_]*$')
_NAMESPACE_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9_]{0,14}$')


def escape_soql(value: Optional[str]) -> str:
    """Escape special characters to prevent SOQL injection.

    Args:
        value: String to escape

    Returns:
        Escaped string safe for SOQL
    """
    if value is None:
        return ''
    return str(value).replace('\\', '\\\\').replace("'", "\\'").replace('"', '\\"').replace('\n', '\\n').replace('\r', '\\r')


def quote_search_term(term: str) -> str:
    """Wrap a SOSL search term in braces.

    Only the characters that would end the literal early are escaped; SOSL
    operators inside the term (``*``, ``?``, ``AND``/``OR``) are passed through.
    """
    escaped = term.replace('\\', '\\\\').replace('{', '\\{').replace('}', '\\}')
    return f"{{{escaped}}}"


def format_soql_value(value: Any) -> str:
    """Format a value for use in SOQL queries.

    Args:
        value: Value to format

    Returns:
        Formatted string for SOQL
    """
    if value is None:
        return 'null'
    elif isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, (int, float)):
        return str(value)
    elif isinstance(value, datetime):
        return value.strftime('%Y-%m-%dT%H:%M:%SZ')
    elif isinstance(value, date):
        return value.strftime('%Y-%m-%d')
    elif isinstance(value, (list, tuple)):
        return ', '.join(format_soql_value(v) for v in value)
    else:
        return f"'{escape_soql(str(value))}'"


def validate_object_name(object_name: str) -> bool:
    """Validate that an object name is safe for SOQL.

    Covers standard objects and custom/namespaced ones (``ns__Thing__c``).
    """
    return bool(_OBJECT_NAME_PATTERN.match(object_name))


def validate_namespace(namespace: str) -> bool:
    """Validate a managed package namespace prefix (max 15 characters)."""
    return bool(_NAMESPACE_PATTERN.match(namespace))


def unique_fields(fields: Iterable[str], *, exclude: Iterable[str] = ()) -> List[str]:
    """Return ``fields`` stripped and de-duplicated case-insensitively.

    First occurrence wins. Names in ``exclude`` (also compared
    case-insensitively) and blank entries are dropped.
    """
    seen = {name.lower() for name in exclude}
    result = []
    for field in fields:
        name = field.strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        result.append(name)
    return result
