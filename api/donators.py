# api/donators.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from api.schemas import DonatorOut, DonatorResponse, DonatorsListResponse, MessageResponse
from api.security import require_api_key
from services.donator_service import DonatorService
from services.factory import get_donator_service

router = APIRouter(
    prefix="/donate",
    tags=["Donators"],
    dependencies=[Depends(require_api_key)],
)


@router.post("", status_code=201, response_model=DonatorResponse)
async def create_donator(
    name: Optional[str] = Form(None),
    message: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),  # Accepted for compatibility, not stored
    slip: Optional[UploadFile] = File(None),
    donator_service: DonatorService = Depends(get_donator_service),
):
    donator = await donator_service.create_donator(name, message, slip)
    return DonatorResponse(
        message="Donator added successfully",
        donator=DonatorOut.from_domain(donator),
    )


@router.get("", response_model=DonatorsListResponse)
async def list_donators(donator_service: DonatorService = Depends(get_donator_service)):
    donators = await donator_service.list_donators()
    return DonatorsListResponse(donators=[DonatorOut.from_domain(d) for d in donators])


@router.get("/allowed", response_model=DonatorsListResponse)
async def list_allowed_donators(donator_service: DonatorService = Depends(get_donator_service)):
    donators = await donator_service.list_allowed()
    return DonatorsListResponse(donators=[DonatorOut.from_domain(d) for d in donators])


@router.get("/unallowed", response_model=DonatorsListResponse)
async def list_unallowed_donators(donator_service: DonatorService = Depends(get_donator_service)):
    donators = await donator_service.list_unallowed()
    return DonatorsListResponse(donators=[DonatorOut.from_domain(d) for d in donators])


@router.put("/{donator_id}", response_model=DonatorResponse)
async def allow_donator(
    donator_id: int,
    donator_service: DonatorService = Depends(get_donator_service),
):
    donator = await donator_service.allow(donator_id)
    return DonatorResponse(
        message="Donator updated successfully",
        donator=DonatorOut.from_domain(donator),
    )


@router.put("/{donator_id}/disallow", response_model=DonatorResponse)
async def disallow_donator(
    donator_id: int,
    donator_service: DonatorService = Depends(get_donator_service),
):
    donator = await donator_service.disallow(donator_id)
    return DonatorResponse(
        message="Donator updated successfully",
        donator=DonatorOut.from_domain(donator),
    )


@router.delete("/{donator_id}", response_model=MessageResponse)
async def delete_donator(
    donator_id: int,
    donator_service: DonatorService = Depends(get_donator_service),
):
    await donator_service.delete(donator_id)
    return MessageResponse(message="Donator deleted successfully")
