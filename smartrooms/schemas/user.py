from typing import List, Optional
from pydantic import Field
from smartrooms.models.role import RoleName
from smartrooms.schemas.common import CamelModel


class UserBase(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str = Field(min_length=1)
    position: Optional[str] = None
    picture: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(min_length=1)
    roles: Optional[List[RoleName]] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = None
    picture: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=1)
    roles: Optional[List[RoleName]] = None


class UserResponse(UserBase):
    id: int


class UserWithRoles(UserResponse):
    roles: List[RoleName]


class AttendeeSummary(CamelModel):
    id: int
    position: Optional[str] = None
    picture: Optional[str] = None
    email: str


class AttendeeDetail(AttendeeSummary):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
