"""Client and vendor endpoints; both are served by the same router factory."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from crud import parties as crud
from database import get_db
from models.clients import Client as ClientModel
from models.vendors import Vendor as VendorModel
from schemas.common import ApiResponse
from schemas.parties import Party, PartyCreate, PartyFilters, PartyUpdate
from utils.auth_utils import get_caller_id


def build_party_router(model, prefix: str, label: str) -> APIRouter:
    router = APIRouter(prefix=prefix, tags=[f"{label}s"])

    @router.post("/", response_model=ApiResponse[Party], status_code=status.HTTP_201_CREATED)
    def create_party(party: PartyCreate, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
        db_party = crud.create_party(db, model, party, caller_id)
        return {"success": True, "data": db_party, "message": f"{label} created successfully"}

    @router.get("/", response_model=ApiResponse[List[Party]])
    def read_parties(
        name: Optional[str] = None,
        tax_id: Optional[str] = None,
        region_id: Optional[int] = None,
        commune_id: Optional[int] = None,
        db: Session = Depends(get_db),
        caller_id: str = Depends(get_caller_id),
    ):
        filters = PartyFilters(name=name, tax_id=tax_id, region_id=region_id, commune_id=commune_id)
        return {"success": True, "data": crud.get_parties(db, model, caller_id, filters)}

    @router.get("/{party_id}", response_model=ApiResponse[Party])
    def read_party(party_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
        return {"success": True, "data": crud.get_party_or_404(db, model, party_id, caller_id)}

    @router.put("/{party_id}", response_model=ApiResponse[Party])
    def update_party(
        party_id: int,
        party: PartyUpdate,
        db: Session = Depends(get_db),
        caller_id: str = Depends(get_caller_id),
    ):
        db_party = crud.update_party(db, model, party_id, party, caller_id)
        return {"success": True, "data": db_party, "message": f"{label} updated successfully"}

    @router.delete("/{party_id}", response_model=ApiResponse)
    def delete_party(party_id: int, db: Session = Depends(get_db), caller_id: str = Depends(get_caller_id)):
        crud.delete_party(db, model, party_id, caller_id)
        return {"success": True, "message": f"{label} deleted successfully"}

    return router


clients_router = build_party_router(ClientModel, "/clients", "Client")
vendors_router = build_party_router(VendorModel, "/vendors", "Vendor")
