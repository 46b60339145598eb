from typing import List
from pydantic import BaseModel
from smartrooms.schemas.user import UserCreate, UserResponse


class SignupRequest(UserCreate):
    pass


class SigninRequest(BaseModel):
    email: str
    password: str


class SigninResponse(UserResponse):
    roles: List[str]
    access_token: str
