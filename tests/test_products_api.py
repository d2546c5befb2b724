from __future__ import annotations

import logging

import asyncpg
import pytest

from core import repository
from core.resources import PRODUCT, PRODUCT_PROFILE

NEW_PRODUCT = {"ProductName": "Ballpoint Pen", "Category": "Office", "Price": 2.5}
NEW_PROFILE = {"Ratings": 4.5, "Color": "Blue", "Brand": "Inkwell"}


def _create_product(client, headers, **overrides) -> int:
    response = client.post("/products", json={**NEW_PRODUCT, **overrides}, headers=headers)
    assert response.status_code == 200
    return response.json()["ProductID"]


def test_create_and_fetch_product(client, auth_headers) -> None:
    response = client.post("/products", json=NEW_PRODUCT, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Product created successfully"

    fetched = client.get(f"/products/{body['ProductID']}", headers=auth_headers)
    assert fetched.json() == {"ProductID": body["ProductID"], **NEW_PRODUCT}


def test_create_product_rejects_client_id(client, store, auth_headers) -> None:
    response = client.post("/products", json={**NEW_PRODUCT, "ProductID": 500}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown field: ProductID"}
    assert store.calls == []


def test_create_after_seeded_row_gets_next_id(client, store, auth_headers) -> None:
    store.seed(PRODUCT, {"ProductID": 1, "ProductName": "Stapler", "Category": "Office", "Price": 4.0})

    assert _create_product(client, auth_headers) == 2
    assert store.row(PRODUCT, 1)["ProductName"] == "Stapler"
    assert store.row(PRODUCT, 2)["ProductName"] == NEW_PRODUCT["ProductName"]


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"ProductName": 12}, "ProductName must be a string"),
        ({"Category": ["a"]}, "Category must be a string"),
        ({"Price": "cheap"}, "Price must be a number"),
        ({"Price": -1}, "Price must not be negative"),
        ({"Price": 10**400}, "Price is out of range"),
    ],
)
def test_create_product_field_checks(client, store, auth_headers, overrides, message) -> None:
    response = client.post("/products", json={**NEW_PRODUCT, **overrides}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert store.calls == []


def test_create_product_missing_field(client, auth_headers) -> None:
    response = client.post("/products", json={"ProductName": "Pen"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Category is required"}


def test_update_product_merge(client, store, auth_headers) -> None:
    product_id = _create_product(client, auth_headers)
    response = client.put(f"/products/{product_id}", json={"Price": 3}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {
        "message": "Product updated successfully",
        "product": {"ProductID": product_id, **NEW_PRODUCT, "Price": 3},
    }


def test_update_product_rejects_unknown_column(client, store, auth_headers) -> None:
    product_id = _create_product(client, auth_headers)
    response = client.put(f"/products/{product_id}", json={"Discount": 10}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Unknown field: Discount"}
    assert "Discount" not in store.row(PRODUCT, product_id)


def test_delete_missing_product(client, auth_headers) -> None:
    response = client.delete("/products/9", headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_product_profile_requires_existing_product(client, store, auth_headers) -> None:
    response = client.post("/productprofiles", json={"ProductID": 3, **NEW_PROFILE}, headers=auth_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product does not exist. Create the product first."}
    assert store.row(PRODUCT_PROFILE, 3) is None


def test_product_profile_lifecycle(client, store, auth_headers) -> None:
    product_id = _create_product(client, auth_headers)

    created = client.post("/productprofiles", json={"ProductID": product_id, **NEW_PROFILE}, headers=auth_headers)
    assert created.json() == {"message": "Product profile created successfully", "ProductID": product_id}

    updated = client.put(f"/productprofiles/{product_id}", json={"Color": "Red"}, headers=auth_headers)
    assert updated.json()["productprofile"] == {"ProductID": product_id, **NEW_PROFILE, "Color": "Red"}

    fetched = client.get(f"/productprofiles/{product_id}", headers=auth_headers)
    assert fetched.json()["Color"] == "Red"

    assert client.delete(f"/productprofiles/{product_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/productprofiles/{product_id}", headers=auth_headers).status_code == 404


def test_product_profile_ratings_range(client, auth_headers) -> None:
    product_id = _create_product(client, auth_headers)
    response = client.post(
        "/productprofiles",
        json={"ProductID": product_id, **NEW_PROFILE, "Ratings": 7},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Ratings must be between 0 and 5"}


def test_product_profile_id_must_be_integer(client, auth_headers) -> None:
    response = client.post("/productprofiles", json={"ProductID": "1", **NEW_PROFILE}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "ProductID must be an integer"}


def test_parent_deleted_between_check_and_insert_is_not_found(client, store, monkeypatch, auth_headers) -> None:
    product_id = _create_product(client, auth_headers)

    async def insert_after_parent_vanished(resource, values, *, conn=None):
        raise asyncpg.ForeignKeyViolationError("insert violates foreign key constraint")

    monkeypatch.setattr(repository, "insert_row", insert_after_parent_vanished)
    response = client.post("/productprofiles", json={"ProductID": product_id, **NEW_PROFILE}, headers=auth_headers)
    assert response.status_code == 404


def test_paginated_products_join_profile_and_filter(client, store, auth_headers) -> None:
    for name in ("Red Pen", "Blue Pen", "Stapler"):
        store.seed(PRODUCT, {"ProductName": name, "Category": "Office", "Price": 1.0})
    store.seed(PRODUCT_PROFILE, {"ProductID": 1, **NEW_PROFILE})

    response = client.put("/products", json={"page": 1, "limit": 10, "ProductName": "pen"}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["totalPages"] == 1
    assert [row["ProductName"] for row in body["products"]] == ["Red Pen", "Blue Pen"]
    assert body["products"][0]["Brand"] == "Inkwell"
    assert body["products"][1]["Brand"] is None


def test_paginated_product_profiles(client, store, auth_headers) -> None:
    for i in range(1, 4):
        store.seed(PRODUCT, {"ProductName": f"P{i}", "Category": "C", "Price": 1.0})
        store.seed(PRODUCT_PROFILE, {"ProductID": i, "Ratings": 3.0, "Color": "Black", "Brand": f"Brand{i}"})

    response = client.put("/productprofiles", json={"page": "2", "limit": "2"}, headers=auth_headers)
    body = response.json()
    assert (body["page"], body["limit"], body["total"], body["totalPages"]) == (2, 2, 3, 2)
    assert body["productprofiles"] == [
        {"ProductID": 3, "Ratings": 3.0, "Color": "Black", "Brand": "Brand3", "ProductName": "P3", "Category": "C", "Price": 1.0}
    ]


def test_driver_error_is_masked_and_logged(client, monkeypatch, auth_headers, caplog) -> None:
    async def broken_insert(resource, values, *, conn=None):
        raise OSError("connection refused to db-primary:5432")

    monkeypatch.setattr(repository, "insert_row", broken_insert)
    with caplog.at_level(logging.ERROR, logger="core.errors"):
        response = client.post("/products", json=NEW_PRODUCT, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "An error occurred while creating product"}
    assert "db-primary" not in response.text
    assert any("creating product" in record.getMessage() for record in caplog.records)


def test_driver_error_on_read_is_masked(client, monkeypatch, auth_headers) -> None:
    async def broken_select(resource, record_id, *, conn=None, lock=""):
        raise asyncpg.PostgresError("relation \"product\" does not exist")

    monkeypatch.setattr(repository, "select_by_id", broken_select)
    response = client.get("/products/1", headers=auth_headers)
    assert response.status_code == 500
    assert response.json() == {"error": "An error occurred while fetching product by ID"}
