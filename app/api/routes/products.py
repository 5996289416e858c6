from typing import Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import get_products_collection
from app.models import OwnerRequest, ProductCreate, ProductUpdate
from app.services import product_service

router = APIRouter()


@router.get("")
async def list_products(collection=Depends(get_products_collection)):
    return await product_service.list_products(collection)


@router.get("/{product_id}")
async def get_product(product_id: str, collection=Depends(get_products_collection)):
    return await product_service.get_product(collection, product_id)


@router.post("", status_code=201)
async def create_product(payload: ProductCreate, collection=Depends(get_products_collection)):
    product = await product_service.create_product(collection, payload)
    return {"message": "Product added successfully", "product": product}


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    payload: Optional[ProductUpdate] = Body(None),
    collection=Depends(get_products_collection),
):
    payload = payload or ProductUpdate()
    modified = await product_service.update_product(collection, product_id, payload)
    return {"message": "Product updated successfully", "modifiedCount": modified}


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    payload: Optional[OwnerRequest] = Body(None),
    collection=Depends(get_products_collection),
):
    user_email = payload.userEmail if payload else None
    deleted = await product_service.delete_product(collection, product_id, user_email)
    return {"message": "Product deleted successfully", "deletedCount": deleted}
