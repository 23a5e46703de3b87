"""Clients and vendors share one shape; they differ only by role."""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class PartyBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    tax_id: str = Field(..., min_length=1)
    business_activity: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    region_id: int
    commune_id: int
    notes: Optional[str] = None


class PartyCreate(PartyBase):
    pass


class PartyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    tax_id: Optional[str] = Field(None, min_length=1)
    business_activity: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    region_id: Optional[int] = None
    commune_id: Optional[int] = None
    notes: Optional[str] = None


class Party(BaseModel):
    id: int
    name: str
    tax_id: str
    business_activity: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    region_id: int
    commune_id: int
    region_name: Optional[str] = None
    commune_name: Optional[str] = None
    notes: Optional[str] = None
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PartyFilters(BaseModel):
    name: Optional[str] = None
    region_id: Optional[int] = None
    commune_id: Optional[int] = None
    tax_id: Optional[str] = None


# Role aliases used by the routers
ClientCreate = VendorCreate = PartyCreate
ClientUpdate = VendorUpdate = PartyUpdate
Client = Vendor = Party
