from datetime import datetime
from typing import List, Optional
from pydantic import Field, field_validator, model_validator
from smartrooms.schemas.common import CamelModel
from smartrooms.schemas.room import RoomSummary
from smartrooms.schemas.user import AttendeeDetail, AttendeeSummary
from smartrooms.utils.validation_helpers import to_naive_utc, validate_date_order


class BookingCreate(CamelModel):
    room_id: Optional[int] = None
    start_date: datetime
    end_date: datetime
    purpose: str = Field(min_length=1)
    is_approved: bool = False
    user_ids: List[int] = []

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        validate_date_order(self.start_date, self.end_date)
        return self


class BookingUpdate(CamelModel):
    room_id: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    purpose: Optional[str] = Field(default=None, min_length=1)
    user_ids: Optional[List[int]] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)


class BookingAttendeesAdd(CamelModel):
    user_ids: List[int] = Field(min_length=1)


class BookingResponse(CamelModel):
    id: int
    room_id: int
    start_date: datetime
    end_date: datetime
    purpose: str
    is_approved: bool


class BookingListItem(BookingResponse):
    room: RoomSummary
    users: List[AttendeeSummary]


class BookingDetail(BookingResponse):
    users: List[AttendeeDetail]


class RoomBookingItem(BookingResponse):
    users: List[AttendeeSummary]


class SessionBookingItem(BookingResponse):
    room: RoomSummary
    users: List[AttendeeDetail]
