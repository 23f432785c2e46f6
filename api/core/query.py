"""
Minimal SELECT builder for asyncpg.

Only what the read endpoints need: a fixed column list from one table with an
optional single equality filter. Table and column names are code constants;
only filter values become query arguments ($1, $2, ...).
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from typing import Any

from .errors import BuildError

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?")


@dataclass(frozen=True)
class Query:
    sql: str
    args: tuple[Any, ...] = ()


def _identifier(name: object, what: str) -> str:
    if not isinstance(name, str) or not _IDENTIFIER.fullmatch(name):
        raise BuildError(f"Invalid {what} name: {name!r}")
    return name


def _column_list(columns: Sequence[str]) -> list[str]:
    # Sets and mappings have no stable order; refuse them.
    if isinstance(columns, (str, Set, Mapping)) or not isinstance(columns, Sequence):
        raise BuildError("Columns must be an ordered sequence of names.")
    if not columns:
        raise BuildError("At least one column is required.")
    return [_identifier(c, "column") for c in columns]


def select(
    table: str,
    columns: Sequence[str],
    *,
    where: tuple[str, Any] | None = None,
) -> Query:
    """
    Build `SELECT <columns> FROM <table> [WHERE <column> = $1]`.

    `where` is a `(column, value)` pair matched by equality.
    """
    table = _identifier(table, "table")
    sql = f"SELECT {', '.join(_column_list(columns))} FROM {table}"

    if where is None:
        return Query(sql=sql)

    if not isinstance(where, tuple) or len(where) != 2:
        raise BuildError(f"Filter must be a (column, value) pair, got {where!r}")
    column, value = where
    column = _identifier(column, "filter column")
    return Query(sql=f"{sql} WHERE {column} = $1", args=(value,))


def select_all(table: str, columns: Sequence[str]) -> Query:
    return select(table, columns)


def select_one(table: str, columns: Sequence[str], key_column: str, key: Any) -> Query:
    return select(table, columns, where=(key_column, key))


def select_children(table: str, columns: Sequence[str], fk_column: str, parent_key: Any) -> Query:
    return select(table, columns, where=(fk_column, parent_key))
