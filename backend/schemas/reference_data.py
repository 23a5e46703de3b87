from pydantic import BaseModel
from typing import Optional


class Region(BaseModel):
    id: int
    name: str
    code: Optional[str] = None

    class Config:
        from_attributes = True


class Commune(BaseModel):
    id: int
    name: str
    region_id: int

    class Config:
        from_attributes = True


class PaymentType(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class Status(BaseModel):
    id: int
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
