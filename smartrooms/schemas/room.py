from typing import Optional
from pydantic import Field
from smartrooms.schemas.common import CamelModel


class RoomBase(CamelModel):
    name: str = Field(min_length=1)
    image: str = Field(min_length=1)
    floor: str = Field(min_length=1)
    point_of_contact_email: str = Field(min_length=1)
    point_of_contact_phone: str = Field(min_length=1)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1)
    image: Optional[str] = Field(default=None, min_length=1)
    floor: Optional[str] = Field(default=None, min_length=1)
    point_of_contact_email: Optional[str] = Field(default=None, min_length=1)
    point_of_contact_phone: Optional[str] = Field(default=None, min_length=1)


class RoomResponse(RoomBase):
    id: int


class RoomSummary(CamelModel):
    id: int
    name: str
