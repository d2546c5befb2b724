"""
Paginated listing: request parsing, SQL construction, response envelope.

The data query always LEFT JOINs a resource with its partner table
(user <-> user_profile, product <-> productprofile) on the shared id column.
An optional case-insensitive substring filter applies to both the count
and the data query.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .errors import BadRequest
from .resources import Resource, column, quote
from .validation import MAX_BIGINT, parse_positive_int, require_object


@dataclass(frozen=True)
class PageRequest:
    page: int
    limit: int
    search: str = ""

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class PageQueries:
    count_sql: str
    count_args: tuple[Any, ...]
    data_sql: str
    data_args: tuple[Any, ...]


def parse_page_request(body: Any, resource: Resource) -> PageRequest:
    body = require_object(body if body is not None else {})
    page = parse_positive_int(body.get("page"))
    limit = parse_positive_int(body.get("limit"))
    # OFFSET is a BIGINT parameter too.
    if page is None or limit is None or (page - 1) * limit > MAX_BIGINT:
        raise BadRequest("Invalid page or limit parameters")

    search = body.get(resource.search_column)
    if search is not None and not isinstance(search, str):
        raise BadRequest(f"{resource.search_column} must be a string")
    return PageRequest(page=page, limit=limit, search=(search or "").strip())


def like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_page_queries(resource: Resource, request: PageRequest) -> PageQueries:
    table = quote(resource.table)
    partner = quote(resource.partner_table)
    id_col = column(resource.table, resource.id_column)

    where = ""
    args: list[Any] = []
    if request.search:
        where = f" WHERE {column(resource.table, resource.search_column)} ILIKE $1"
        args.append(like_pattern(request.search))

    count_sql = f"SELECT count(*) AS total FROM {table}{where}"

    selected = [column(resource.table, c) for c in resource.public_columns]
    selected += [column(resource.partner_table, c) for c in resource.partner_columns]
    n = len(args)
    data_sql = (
        f"SELECT {', '.join(selected)} "
        f"FROM {table} "
        f"LEFT JOIN {partner} ON {id_col} = {column(resource.partner_table, resource.id_column)}"
        f"{where} "
        f"ORDER BY {id_col} "
        f"LIMIT ${n + 1} OFFSET ${n + 2}"
    )
    return PageQueries(
        count_sql=count_sql,
        count_args=tuple(args),
        data_sql=data_sql,
        data_args=(*args, request.limit, request.offset),
    )


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def envelope(resource: Resource, request: PageRequest, total: int, rows: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "page": request.page,
        "limit": request.limit,
        "totalPages": total_pages(total, request.limit),
        "total": total,
        resource.collection: rows,
    }
