"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductIn(BaseModel):
    """Body of POST /products."""

    title: str
    description: str = ""
    price: Decimal = Field(ge=0)
    thumbnail: str = ""
    code: str
    stock: int = Field(ge=0)


class ProductPatch(BaseModel):
    """Body of PUT /products/{id}. Only the fields sent are changed.

    Unknown keys, including ``id``, are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    thumbnail: Optional[str] = None
    code: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    price: float
    thumbnail: str
    code: str
    stock: int


class ErrorOut(BaseModel):
    error: str
