"""
Static table definitions for the four resources.

These are the only source of SQL identifiers: column and table names in
generated statements always come from here, never from request bodies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def quote(identifier: str) -> str:
    """
    Quote a PostgreSQL identifier ("user" is reserved, "ProductID" is mixed case).
    """
    return '"' + identifier.replace('"', '""') + '"'


def column(table: str, name: str) -> str:
    return f"{quote(table)}.{quote(name)}"


@dataclass(frozen=True)
class Resource:
    name: str
    label: str
    table: str
    id_column: str
    # Non-identity columns, in insert order. Also the merge-patch allowlist.
    columns: tuple[str, ...]
    # Key used for list payloads (`{"users": [...]}`).
    collection: str
    search_column: str
    # Table joined in paginated listings; shares `id_column` with this one.
    partner_table: str
    partner_columns: tuple[str, ...]
    # Columns never returned to clients.
    hidden: tuple[str, ...] = field(default=())
    # Parent resource a row must reference (profiles only).
    parent: Resource | None = None

    @property
    def all_columns(self) -> tuple[str, ...]:
        return (self.id_column, *self.columns)

    @property
    def public_columns(self) -> tuple[str, ...]:
        return tuple(c for c in self.all_columns if c not in self.hidden)

    def public(self, row: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in row.items() if k not in self.hidden}


USER = Resource(
    name="user",
    label="User",
    table="user",
    id_column="user_id",
    columns=("firstname", "lastname", "email", "password"),
    collection="users",
    search_column="firstname",
    partner_table="user_profile",
    partner_columns=("age", "address", "contact_number", "pnn_number"),
    hidden=("password",),
)

USER_PROFILE = Resource(
    name="user_profile",
    label="User profile",
    table="user_profile",
    id_column="user_id",
    columns=("age", "address", "contact_number", "pnn_number"),
    collection="userprofiles",
    search_column="address",
    partner_table="user",
    partner_columns=("firstname", "lastname", "email"),
    parent=USER,
)

PRODUCT = Resource(
    name="product",
    label="Product",
    table="product",
    id_column="ProductID",
    columns=("ProductName", "Category", "Price"),
    collection="products",
    search_column="ProductName",
    partner_table="productprofile",
    partner_columns=("Ratings", "Color", "Brand"),
)

PRODUCT_PROFILE = Resource(
    name="productprofile",
    label="Product profile",
    table="productprofile",
    id_column="ProductID",
    columns=("Ratings", "Color", "Brand"),
    collection="productprofiles",
    search_column="Brand",
    partner_table="product",
    partner_columns=("ProductName", "Category", "Price"),
    parent=PRODUCT,
)
