"""Read-only catalog routes"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from services.inventory_service.repository import InventoryRepository
from services.inventory_service.schemas import ProductSchema
from shared.database import get_db

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=List[ProductSchema])
def list_products(db: Session = Depends(get_db)):
    """List active products, newest first"""
    return InventoryRepository(db).list_active_products()


@router.get("/categories", response_model=List[str])
def list_categories(db: Session = Depends(get_db)):
    """List categories of active products"""
    return ["All", *InventoryRepository(db).distinct_categories()]


@router.get("/{product_id}", response_model=ProductSchema)
def get_product(product_id: str, db: Session = Depends(get_db)):
    """Get a product by ID"""
    product = InventoryRepository(db).get_product(product_id)
    if not product:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Product with ID "{product_id}" not found',
        )
    return product
