from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductSchema(BaseModel):
    """Product schema."""

    model_config = ConfigDict(from_attributes=True)

    product_id: str
    name: str
    description: Optional[str] = None
    price: float
    stock: int
    category: str
    image: str = ""
    is_active: bool = True
