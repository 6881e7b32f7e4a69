from typing import List

from fastapi import APIRouter, Depends, Request, status

from spa_booking.models.booking_models import MessageResponse
from spa_booking.models.testimonial_models import Testimonial, TestimonialRequest
from spa_booking.services.testimonial_service import TestimonialStore

router = APIRouter()

def get_testimonial_store(request: Request) -> TestimonialStore:
    return request.app.state.testimonial_store

@router.post("/testimonials", response_model=Testimonial, status_code=status.HTTP_201_CREATED)
async def create_testimonial(req: TestimonialRequest, store: TestimonialStore = Depends(get_testimonial_store)):
    return await store.create(req)

@router.get("/testimonials", response_model=List[Testimonial])
async def list_testimonials(store: TestimonialStore = Depends(get_testimonial_store)):
    return await store.list()

@router.delete("/testimonials/{testimonial_id}", response_model=MessageResponse)
async def delete_testimonial(testimonial_id: int, store: TestimonialStore = Depends(get_testimonial_store)):
    await store.delete(testimonial_id)
    return {"message": f"✅ Testimonial with ID {testimonial_id} deleted successfully."}
