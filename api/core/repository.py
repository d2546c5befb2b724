"""
Generic table gateway (raw SQL) shared by every resource.

Statements are built from `Resource` definitions only. Functions that take
`conn` run on that connection (inside a transaction); the rest use the pool.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from . import db
from .pagination import PageRequest, build_page_queries
from .resources import Resource, quote


def select_sql(resource: Resource, *, lock: str = "") -> str:
    cols = ", ".join(quote(c) for c in resource.all_columns)
    sql = f"SELECT {cols} FROM {quote(resource.table)} WHERE {quote(resource.id_column)} = $1"
    if lock:
        sql += f" FOR {lock}"
    return sql


def insert_sql(resource: Resource, columns: list[str]) -> str:
    cols = ", ".join(quote(c) for c in columns)
    placeholders = ", ".join(f"${i}" for i in range(1, len(columns) + 1))
    return (
        f"INSERT INTO {quote(resource.table)} ({cols}) "
        f"VALUES ({placeholders}) "
        f"RETURNING {quote(resource.id_column)}"
    )


def replace_sql(resource: Resource) -> str:
    """
    Full replace of every non-identity column; the id is the last parameter.
    """
    assignments = ", ".join(f"{quote(c)} = ${i}" for i, c in enumerate(resource.columns, start=1))
    return (
        f"UPDATE {quote(resource.table)} SET {assignments} "
        f"WHERE {quote(resource.id_column)} = ${len(resource.columns) + 1}"
    )


async def select_by_id(
    resource: Resource,
    record_id: int,
    *,
    conn: asyncpg.Connection | None = None,
    lock: str = "",
) -> dict[str, Any] | None:
    return await db.fetch_one(select_sql(resource, lock=lock), record_id, conn=conn)


async def select_all(resource: Resource) -> list[dict[str, Any]]:
    cols = ", ".join(quote(c) for c in resource.public_columns)
    return await db.fetch_all(
        f"SELECT {cols} FROM {quote(resource.table)} ORDER BY {quote(resource.id_column)}"
    )


async def insert_row(
    resource: Resource,
    values: dict[str, Any],
    *,
    conn: asyncpg.Connection | None = None,
) -> int:
    columns = [c for c in resource.all_columns if c in values]
    new_id = await db.fetch_value(insert_sql(resource, columns), *(values[c] for c in columns), conn=conn)
    return int(new_id)


async def replace_row(
    resource: Resource,
    record_id: int,
    values: dict[str, Any],
    *,
    conn: asyncpg.Connection | None = None,
) -> int:
    args = [values.get(c) for c in resource.columns]
    return await db.execute(replace_sql(resource), *args, record_id, conn=conn)


async def delete_row(resource: Resource, record_id: int) -> int:
    return await db.execute(
        f"DELETE FROM {quote(resource.table)} WHERE {quote(resource.id_column)} = $1",
        record_id,
    )


async def fetch_page(resource: Resource, request: PageRequest) -> tuple[int, list[dict[str, Any]]]:
    queries = build_page_queries(resource, request)
    total = await db.fetch_value(queries.count_sql, *queries.count_args)
    rows = await db.fetch_all(queries.data_sql, *queries.data_args)
    return int(total or 0), rows
