"""
Helpers for building parameterized SQL fragments.

Placeholders are positional ($1, $2, ...) and always derived from the
position of the value in the returned list. See app.core.database.run_query
for how they are executed.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.core.errors import ApiError


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    js_to_sql: Optional[Mapping[str, str]] = None
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause of an UPDATE from partial data.

    Fields missing from js_to_sql use their own name as the column name.

    Example:
        sql_for_partial_update({"firstName": "Aliya", "age": 32},
                               {"firstName": "first_name"})
        -> ('"first_name"=$1, "age"=$2', ["Aliya", 32])

    Args:
        data_to_update: Field name -> new value, in the order to emit
        js_to_sql: Field name -> column name aliases

    Returns:
        (set_cols, values) where values[n - 1] binds to $n

    Raises:
        ApiError(INVALID_INPUT): If there is nothing to update
    """
    keys = list(data_to_update.keys())
    if not keys:
        raise ApiError.invalid_input("No data")

    aliases = js_to_sql or {}
    cols = [
        f'"{aliases.get(key, key)}"=${idx}'
        for idx, key in enumerate(keys, start=1)
    ]

    return ", ".join(cols), [data_to_update[key] for key in keys]


class WhereClause:
    """
    Accumulates AND-ed predicates for a WHERE clause.

    Each call to add() appends one fragment. A "{}" in the fragment is
    replaced by the next positional placeholder, whose index is the length
    of the parameter list after the value is appended.
    """

    def __init__(self, start: int = 1):
        self._offset = start - 1
        self.fragments: List[str] = []
        self.values: List[Any] = []

    def add(self, fragment: str, value: Any = None, *, literal: bool = False) -> None:
        if literal:
            self.fragments.append(fragment)
            return
        self.values.append(value)
        self.fragments.append(fragment.format(f"${self._offset + len(self.values)}"))

    def build(self) -> Tuple[str, List[Any]]:
        if not self.fragments:
            return "", []
        return "WHERE " + " AND ".join(self.fragments), list(self.values)


def is_integer(value: Any) -> bool:
    # bool is a subclass of int; a flag is never a count
    return isinstance(value, int) and not isinstance(value, bool)


def present(filters: Optional[Dict[str, Any]], key: str) -> bool:
    return bool(filters) and filters.get(key) is not None
