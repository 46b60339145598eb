from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from smartrooms.config import settings
from smartrooms.db import get_db
from smartrooms.models.user import User
from smartrooms.schemas.booking import (
    BookingAttendeesAdd,
    BookingCreate,
    BookingDetail,
    BookingListItem,
    BookingResponse,
    BookingUpdate,
)
from smartrooms.schemas.common import Message
from smartrooms.schemas.user import UserResponse
from smartrooms.services.bookings import BookingService
from smartrooms.utils.auth import get_current_user
from smartrooms.utils.authorization import is_moderator, is_moderator_or_admin

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"],
)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db, reject_overlaps=settings.REJECT_OVERLAPPING_BOOKINGS)


@router.get(
    "",
    response_model=List[BookingListItem],
    summary="List all bookings",
)
def get_bookings(
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(get_current_user),
):
    """
    Retrieve every booking with its room (id, name) and attendees
    (id, position, picture, email).
    """
    return service.list()


@router.get(
    "/{booking_id}",
    response_model=BookingDetail,
    summary="Get a booking by ID",
)
def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(get_current_user),
):
    return service.get(booking_id)


@router.get(
    "/{booking_id}/users",
    response_model=List[UserResponse],
    summary="List booking attendees",
)
def get_booking_users(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(get_current_user),
):
    return service.attendees(booking_id)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description=(
        "Create a booking for a room, optionally with attendees. Requires authentication. "
        "Creating an already approved booking (isApproved=true) requires the MODERATOR role."
    ),
)
def create_booking(
    booking: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_user),
):
    """
    Create a new booking.

    - **roomId**: ID of the room to book.
    - **startDate** / **endDate**: booking period, start before end.
    - **purpose**: Purpose of the booking.
    - **isApproved**: only moderators may create an approved booking.
    - **userIds**: attendees to link to the booking.
    """
    return service.create(booking, current_user)


@router.post(
    "/{booking_id}/users",
    response_model=Message,
    summary="Add attendees to a booking",
)
def add_booking_users(
    booking_id: int,
    payload: BookingAttendeesAdd,
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(is_moderator_or_admin),
):
    service.add_attendees(booking_id, payload.user_ids)
    return {"message": "Users added to the booking successfully."}


@router.put(
    "/{booking_id}",
    response_model=Message,
    summary="Update a booking",
    description="Partially update a booking. A non-empty userIds list replaces the attendees.",
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(is_moderator_or_admin),
):
    service.update(booking_id, booking_update)
    return {"message": "Booking updated successfully."}


@router.put(
    "/{booking_id}/approve",
    response_model=Message,
    summary="Approve a booking",
)
def approve_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(is_moderator),
):
    service.approve(booking_id, current_user.id)
    return {"message": "Booking approved successfully."}


@router.delete(
    "/{booking_id}",
    response_model=Message,
    summary="Delete a booking",
)
def delete_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(is_moderator_or_admin),
):
    service.delete(booking_id)
    return {"message": "Booking deleted successfully."}


@router.delete(
    "/{booking_id}/users/{user_id}",
    response_model=Message,
    summary="Remove an attendee from a booking",
)
def remove_booking_user(
    booking_id: int,
    user_id: int,
    service: BookingService = Depends(get_booking_service),
    _: User = Depends(is_moderator_or_admin),
):
    service.remove_attendee(booking_id, user_id)
    return {"message": "User removed from the booking successfully."}
