from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Minutes as a number, or free text such as "60min" / "90 min"
DurationValue = Union[int, float, str]
PriceValue = Union[int, float, str]

class BookingRequest(BaseModel):
    """
    Incoming POST /booking body. Every field is optional here so that a missing
    required field is reported by the booking store as a 400, not by FastAPI as a 422.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    service: Optional[str] = None
    requested_therapist: Optional[str] = None
    duration: Optional[DurationValue] = None
    price: Optional[PriceValue] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    start_time: Optional[str] = Field(default=None, alias="datetime")
    aroma_oil: Optional[str] = None
    pressure: Optional[str] = None
    focus_area: Optional[str] = None
    avoid_area: Optional[str] = None


class Booking(BaseModel):
    """A stored booking. `start_time` and `booked_on` are canonical UTC timestamps."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    id: int
    service: str
    requested_therapist: Optional[str] = None
    duration: DurationValue
    price: PriceValue
    gender: str
    phone: str
    start_time: str = Field(alias="datetime")
    aroma_oil: Optional[str] = None
    pressure: Optional[str] = None
    focus_area: Optional[str] = None
    avoid_area: Optional[str] = None
    booked_on: str


class MessageResponse(BaseModel):
    message: str
