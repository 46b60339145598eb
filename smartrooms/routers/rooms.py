from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from smartrooms.config import settings
from smartrooms.db import get_db
from smartrooms.models.user import User
from smartrooms.schemas.booking import RoomBookingItem
from smartrooms.schemas.common import Message
from smartrooms.schemas.room import RoomCreate, RoomUpdate, RoomResponse
from smartrooms.services.rooms import RoomService
from smartrooms.utils.auth import get_current_user
from smartrooms.utils.authorization import is_admin, is_moderator_or_admin


router = APIRouter(
    prefix="/api/rooms",
    tags=["rooms"],
)


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(db, delete_cascade=settings.ROOM_DELETE_CASCADE)


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    room: RoomCreate,
    service: RoomService = Depends(get_room_service),
    _: User = Depends(is_admin),
):
    """
    Create a new meeting room.
    Requires the ADMIN role. All five fields are mandatory.
    """
    return service.create(room)


@router.get("", response_model=List[RoomResponse])
def get_rooms(
    service: RoomService = Depends(get_room_service),
    _: User = Depends(get_current_user),
):
    """
    Retrieve a list of all meeting rooms.
    """
    return service.list()


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    service: RoomService = Depends(get_room_service),
    _: User = Depends(get_current_user),
):
    """
    Retrieve a specific meeting room by ID.
    """
    return service.get(room_id)


@router.get("/{room_id}/bookings", response_model=List[RoomBookingItem])
def get_room_bookings(
    room_id: int,
    service: RoomService = Depends(get_room_service),
    _: User = Depends(get_current_user),
):
    """
    Retrieve the bookings of a room with their attendees.
    """
    return service.bookings(room_id)


@router.put("/{room_id}", response_model=Message)
def update_room(
    room_id: int,
    room_update: RoomUpdate,
    service: RoomService = Depends(get_room_service),
    _: User = Depends(is_moderator_or_admin),
):
    """
    Update a meeting room's details.
    Requires the MODERATOR or ADMIN role.
    """
    service.update(room_id, room_update)
    return {"message": "Room updated successfully."}


@router.delete("/{room_id}", response_model=Message)
def delete_room(
    room_id: int,
    service: RoomService = Depends(get_room_service),
    _: User = Depends(is_admin),
):
    """
    Delete a meeting room.
    Requires the ADMIN role.
    """
    service.delete(room_id)
    return {"message": "Room deleted successfully."}
