from typing import List

from fastapi import APIRouter, Depends, Request, status

from spa_booking.models.booking_models import Booking, BookingRequest, MessageResponse
from spa_booking.services.booking_service import BookingStore

router = APIRouter()

def get_booking_store(request: Request) -> BookingStore:
    return request.app.state.booking_store

@router.post("/booking", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_booking(req: BookingRequest, store: BookingStore = Depends(get_booking_store)):
    return await store.create(req)

@router.get("/booking", response_model=List[Booking])
async def list_bookings(store: BookingStore = Depends(get_booking_store)):
    return await store.list()

@router.get("/booking/{booking_id}", response_model=Booking)
async def get_booking(booking_id: int, store: BookingStore = Depends(get_booking_store)):
    return await store.get(booking_id)

@router.delete("/booking/{booking_id}", response_model=MessageResponse)
async def cancel_booking(booking_id: int, store: BookingStore = Depends(get_booking_store)):
    await store.cancel(booking_id)
    return {"message": f"Booking with ID {booking_id} cancelled."}
