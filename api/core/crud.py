"""
Generic CRUD operations shared by every resource.

Scope:
- merge-patch update (fetch, shallow merge, full replace)
- existence-gated insert for profile rows
- fetch / list / paginate / delete with uniform NotFound handling

Callers validate request bodies first (see `core/validation.py`); nothing
here touches the database before validation has passed.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from . import db, repository
from .errors import NotFound, driver_errors
from .pagination import PageRequest, envelope
from .resources import Resource

logger = logging.getLogger(__name__)


def merge_patch(current: Mapping[str, Any], patch: Mapping[str, Any], allowed: Iterable[str]) -> dict[str, Any]:
    """
    Shallow merge: keys present in `patch` override `current`, absent keys keep
    their current value. Only `allowed` keys are taken from the patch.
    """
    allowed_set = set(allowed)
    merged = dict(current)
    for key, value in patch.items():
        if key in allowed_set:
            merged[key] = value
    return merged


def _noun(resource: Resource) -> str:
    return resource.label.lower()


def _not_found(resource: Resource) -> NotFound:
    return NotFound(f"{resource.label} not found")


def _missing_parent(parent: Resource) -> NotFound:
    return NotFound(f"{parent.label} does not exist. Create the {_noun(parent)} first.")


async def get(resource: Resource, record_id: int) -> dict[str, Any]:
    with driver_errors(f"fetching {_noun(resource)} by ID", resource=resource.name, id=record_id):
        row = await repository.select_by_id(resource, record_id)
    if row is None:
        raise _not_found(resource)
    return resource.public(row)


async def list_all(resource: Resource) -> list[dict[str, Any]]:
    with driver_errors(f"fetching {resource.collection}", resource=resource.name):
        return await repository.select_all(resource)


async def list_page(resource: Resource, request: PageRequest) -> dict[str, Any]:
    with driver_errors(f"fetching {resource.collection}", resource=resource.name, page=request.page):
        total, rows = await repository.fetch_page(resource, request)
    return envelope(resource, request, total, rows)


async def create(resource: Resource, values: dict[str, Any]) -> int:
    with driver_errors(
        f"creating {_noun(resource)}",
        conflict=f"{resource.label} already exists",
        resource=resource.name,
    ):
        new_id = await repository.insert_row(resource, values)
    logger.info("record_created resource=%s id=%s", resource.name, new_id)
    return new_id


async def create_dependent(resource: Resource, values: dict[str, Any]) -> int:
    """
    Insert a row that references a parent row by `resource.id_column`.

    The parent lookup and the insert share one transaction; the parent row is
    held FOR SHARE so it cannot be deleted in between.
    """
    parent = resource.parent
    if parent is None:
        raise ValueError(f"{resource.name} has no parent resource")

    parent_id = values[resource.id_column]
    missing = _missing_parent(parent)
    with driver_errors(
        f"creating {_noun(resource)}",
        not_found=missing.message,
        conflict=f"{resource.label} already exists",
        resource=resource.name,
        parent_id=parent_id,
    ):
        async with db.transaction() as conn:
            parent_row = await repository.select_by_id(parent, parent_id, conn=conn, lock="SHARE")
            if parent_row is None:
                raise missing
            new_id = await repository.insert_row(resource, values, conn=conn)
    logger.info("record_created resource=%s id=%s parent=%s", resource.name, new_id, parent.name)
    return new_id


async def update(resource: Resource, record_id: int, patch: dict[str, Any]) -> dict[str, Any]:
    """
    Merge-patch update. One read (FOR UPDATE) and one full-replace write,
    both inside a single transaction.

    A write that matches zero rows means the row disappeared; that is reported
    as NotFound. PostgreSQL counts matched rows, so a patch that leaves the
    values unchanged still succeeds.
    """
    with driver_errors(f"updating {_noun(resource)}", resource=resource.name, id=record_id):
        async with db.transaction() as conn:
            current = await repository.select_by_id(resource, record_id, conn=conn, lock="UPDATE")
            if current is None:
                raise _not_found(resource)
            merged = merge_patch(current, patch, resource.columns)
            affected = await repository.replace_row(resource, record_id, merged, conn=conn)
            if affected == 0:
                raise _not_found(resource)
    logger.info("record_updated resource=%s id=%s fields=%s", resource.name, record_id, sorted(patch))
    return resource.public(merged)


async def delete(resource: Resource, record_id: int) -> None:
    with driver_errors(f"deleting {_noun(resource)} by ID", resource=resource.name, id=record_id):
        affected = await repository.delete_row(resource, record_id)
    if affected == 0:
        raise _not_found(resource)
    logger.info("record_deleted resource=%s id=%s", resource.name, record_id)
