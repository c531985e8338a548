# bookstore/models.py
from pydantic import BaseModel, Field, field_validator


class Book(BaseModel):
    title: str
    author: str
    genre: str
    published_year: int = Field(..., gt=0)
    price: float = Field(..., ge=0, description="Currency, two fraction digits")
    in_stock: bool
    pages: int = Field(..., gt=0)
    publisher: str

    @field_validator("price")
    @classmethod
    def round_price(cls, v):
        return round(v, 2)
