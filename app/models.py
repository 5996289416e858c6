from pydantic import BaseModel
from typing import Any, Optional, Union

# Every field is optional at the schema level so that missing fields produce
# the API's own error messages instead of a generic validation response.

class ProductMeta(BaseModel):
    date: Optional[str] = None
    priority: Optional[str] = None


class ProductCreate(BaseModel):
    title: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[str, float]] = None
    userEmail: Optional[str] = None
    meta: Optional[ProductMeta] = None


class ProductUpdate(BaseModel):
    title: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[str, float]] = None
    # stored as sent, replacing the previous meta
    meta: Optional[Any] = None
    userEmail: Optional[Any] = None


class OwnerRequest(BaseModel):
    userEmail: Optional[Any] = None
