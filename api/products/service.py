"""
Product and product-profile business logic.
"""

from __future__ import annotations

from typing import Any

from core import crud, validation
from core.pagination import parse_page_request
from core.resources import PRODUCT, PRODUCT_PROFILE

PRODUCT_RULES: validation.Rules = {
    "ProductName": (validation.string,),
    "Category": (validation.string,),
    "Price": (validation.number, validation.non_negative),
}

PRODUCT_PROFILE_IDENTITY: validation.Rules = {
    "ProductID": (validation.positive_integer,),
}

PRODUCT_PROFILE_RULES: validation.Rules = {
    "Ratings": (validation.number, validation.between(0, 5)),
    "Color": (validation.string,),
    "Brand": (validation.string,),
}


# products

async def create_product(body: Any) -> dict:
    values = validation.validate_create(body, PRODUCT_RULES)
    product_id = await crud.create(PRODUCT, values)
    return {"message": "Product created successfully", "ProductID": product_id}


async def list_products() -> list[dict]:
    return await crud.list_all(PRODUCT)


async def page_products(body: Any) -> dict:
    return await crud.list_page(PRODUCT, parse_page_request(body, PRODUCT))


async def get_product(raw_id: str) -> dict:
    return await crud.get(PRODUCT, validation.parse_id(raw_id, "product"))


async def update_product(raw_id: str, body: Any) -> dict:
    product_id = validation.parse_id(raw_id, "product")
    patch = validation.validate_patch(body, PRODUCT_RULES, identity=PRODUCT.id_column)
    product = await crud.update(PRODUCT, product_id, patch)
    return {"message": "Product updated successfully", "product": product}


async def delete_product(raw_id: str) -> dict:
    await crud.delete(PRODUCT, validation.parse_id(raw_id, "product"))
    return {"message": "Product deleted successfully"}


# product profiles

async def create_product_profile(body: Any) -> dict:
    values = validation.validate_create(body, {**PRODUCT_PROFILE_IDENTITY, **PRODUCT_PROFILE_RULES})
    product_id = await crud.create_dependent(PRODUCT_PROFILE, values)
    return {"message": "Product profile created successfully", "ProductID": product_id}


async def list_product_profiles() -> list[dict]:
    return await crud.list_all(PRODUCT_PROFILE)


async def page_product_profiles(body: Any) -> dict:
    return await crud.list_page(PRODUCT_PROFILE, parse_page_request(body, PRODUCT_PROFILE))


async def get_product_profile(raw_id: str) -> dict:
    return await crud.get(PRODUCT_PROFILE, validation.parse_id(raw_id, "product profile"))


async def update_product_profile(raw_id: str, body: Any) -> dict:
    product_id = validation.parse_id(raw_id, "product profile")
    patch = validation.validate_patch(body, PRODUCT_PROFILE_RULES, identity=PRODUCT_PROFILE.id_column)
    profile = await crud.update(PRODUCT_PROFILE, product_id, patch)
    return {"message": "Product profile updated successfully", "productprofile": profile}


async def delete_product_profile(raw_id: str) -> dict:
    await crud.delete(PRODUCT_PROFILE, validation.parse_id(raw_id, "product profile"))
    return {"message": "Product profile deleted successfully"}
