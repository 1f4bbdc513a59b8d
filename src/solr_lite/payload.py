"""
Best-effort accessors over a SOLR JSON response.

SOLR responses are loosely typed and their shape changes with the request
(grouping, faceting, ``json.nl``). These helpers walk the decoded JSON tree
and fall back to a default instead of raising when a key is missing or a
node has an unexpected type.
"""

from typing import Any, Dict, List, Optional, Tuple, Union

Key = Union[str, int]


def dig(data: Any, *path: Key, default: Any = None) -> Any:
    """
    Walk ``data`` following ``path``.

    String keys index dictionaries and integer keys index lists.

    Returns:
        The value found, or ``default`` if any step is missing.
    """
    node = data
    for key in path:
        if isinstance(key, int) and isinstance(node, list):
            if -len(node) <= key < len(node):
                node = node[key]
                continue
            return default
        if isinstance(node, dict) and key in node:
            node = node[key]
            continue
        return default
    if node is None:
        return default
    return node


def as_int(value: Any, default: int = 0) -> int:
    """Convert a JSON value to an int, ``default`` if it is not numeric."""
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def dig_int(data: Any, *path: Key, default: int = 0) -> int:
    """Like ``dig`` but converts the value to an int."""
    return as_int(dig(data, *path), default)


def dig_list(data: Any, *path: Key) -> List[Any]:
    """Like ``dig`` but returns an empty list unless the value is a list."""
    value = dig(data, *path)
    return value if isinstance(value, list) else []


def dig_dict(data: Any, *path: Key) -> Dict[str, Any]:
    """Like ``dig`` but returns an empty dict unless the value is a dict."""
    value = dig(data, *path)
    return value if isinstance(value, dict) else {}


def named_pairs(value: Any) -> List[Tuple[Any, Any]]:
    """
    Normalise a SOLR "named list" into ``(name, value)`` pairs.

    SOLR renders named lists according to ``json.nl``:

    * flat (default): ``["a", 1, "b", 2]``
    * arrarr: ``[["a", 1], ["b", 2]]``
    * map: ``{"a": 1, "b": 2}``

    A trailing name without a value in the flat form is dropped.
    """
    if isinstance(value, dict):
        return list(value.items())
    if not isinstance(value, list):
        return []
    if value and all(isinstance(v, list) and len(v) == 2 for v in value):
        return [(v[0], v[1]) for v in value]
    return [(value[i], value[i + 1]) for i in range(0, len(value) - 1, 2)]


def to_number(value: Any) -> Optional[Union[int, float]]:
    """Convert a SOLR bucket value (often a string) to an int or float."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
