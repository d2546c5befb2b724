"""
Product and product-profile API endpoints.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_user)])


@router.post("/products")
async def create_product(body: Any = Body(default=None)) -> dict:
    return await service.create_product(body)


@router.get("/products")
async def list_products() -> list[dict]:
    return await service.list_products()


@router.put("/products")
async def page_products(body: Any = Body(default=None)) -> dict:
    return await service.page_products(body)


@router.get("/products/{product_id}")
async def get_product(product_id: str) -> dict:
    return await service.get_product(product_id)


@router.put("/products/{product_id}")
async def update_product(product_id: str, body: Any = Body(default=None)) -> dict:
    return await service.update_product(product_id, body)


@router.delete("/products/{product_id}")
async def delete_product(product_id: str) -> dict:
    return await service.delete_product(product_id)


@router.post("/productprofiles")
async def create_product_profile(body: Any = Body(default=None)) -> dict:
    return await service.create_product_profile(body)


@router.get("/productprofiles")
async def list_product_profiles() -> list[dict]:
    return await service.list_product_profiles()


@router.put("/productprofiles")
async def page_product_profiles(body: Any = Body(default=None)) -> dict:
    return await service.page_product_profiles(body)


@router.get("/productprofiles/{product_id}")
async def get_product_profile(product_id: str) -> dict:
    return await service.get_product_profile(product_id)


@router.put("/productprofiles/{product_id}")
async def update_product_profile(product_id: str, body: Any = Body(default=None)) -> dict:
    return await service.update_product_profile(product_id, body)


@router.delete("/productprofiles/{product_id}")
async def delete_product_profile(product_id: str) -> dict:
    return await service.delete_product_profile(product_id)
