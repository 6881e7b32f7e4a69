from typing import Optional
from pydantic import BaseModel, ConfigDict, StrictInt
from pydantic.alias_generators import to_camel

class TestimonialRequest(BaseModel):
    # Required fields are checked by the testimonial store (400 instead of 422)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    reviewer_name: Optional[str] = None
    reviewer_email: Optional[str] = None
    review_title: Optional[str] = None
    review_text: Optional[str] = None
    rating: Optional[StrictInt] = None
    genuine_opinion: Optional[bool] = None


class Testimonial(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    reviewer_name: str
    reviewer_email: str
    review_title: str
    review_text: str
    rating: int
    genuine_opinion: bool
    created_at: str
