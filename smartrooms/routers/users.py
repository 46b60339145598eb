from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from smartrooms.db import get_db
from smartrooms.errors import Forbidden
from smartrooms.models.user import User
from smartrooms.schemas.booking import BookingResponse, SessionBookingItem
from smartrooms.schemas.common import Message
from smartrooms.schemas.user import UserCreate, UserResponse, UserUpdate, UserWithRoles
from smartrooms.services.users import UserService
from smartrooms.utils.auth import get_current_user
from smartrooms.utils.authorization import ADMIN_ONLY, authorize, is_admin

router = APIRouter(
    prefix="/api",
    tags=["users"],
)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("/users", response_model=List[UserResponse])
def get_users(
    service: UserService = Depends(get_user_service),
    _: User = Depends(get_current_user),
):
    return service.list()


@router.get("/users/{user_id}", response_model=UserWithRoles)
def get_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: User = Depends(get_current_user),
):
    """Profile of a user with the names of its roles."""
    return service.info(user_id)


@router.get("/users/{user_id}/bookings", response_model=List[BookingResponse])
def get_user_bookings(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: User = Depends(get_current_user),
):
    return service.bookings(user_id)


@router.post("/users", response_model=Message)
def create_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
    _: User = Depends(is_admin),
):
    """
    Register a user on someone's behalf.
    Requires the ADMIN role. Without roles the user gets USER.
    """
    service.create(user)
    return {"message": "User was registered successfully!"}


@router.put("/users/{user_id}", response_model=Message)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    service: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    """
    Update a profile. Users may update themselves; admins may update anyone
    and are the only ones allowed to change roles.
    """
    if current_user.id != user_id and not authorize(current_user.role_names, ADMIN_ONLY):
        raise Forbidden("Require Admin Role!")
    service.update(user_id, user_update, current_user)
    return {"message": "User updated successfully!"}


@router.delete("/users/{user_id}", response_model=Message)
def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service),
    _: User = Depends(is_admin),
):
    service.delete(user_id)
    return {"message": "User deleted successfully!"}


@router.get("/user", response_model=UserWithRoles)
def get_session_user(
    service: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    return service.info(current_user.id)


@router.get("/user/bookings", response_model=List[SessionBookingItem])
def get_session_user_bookings(
    service: UserService = Depends(get_user_service),
    current_user: User = Depends(get_current_user),
):
    """Bookings the caller attends, each with its room and attendees."""
    return service.bookings(current_user.id)
