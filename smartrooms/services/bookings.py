"""
Booking operations.

A booking starts unapproved and can only move to approved through
``approve``. Deleting it ends its life. Attendees are users linked through
the ``booking_attendees`` association table.
"""
import logging
from typing import Iterable, List
from sqlalchemy.orm import Session, selectinload
from smartrooms.errors import Forbidden, InvalidInput, NotFound
from smartrooms.models.booking import Booking, booking_attendees
from smartrooms.models.room import Room
from smartrooms.models.user import User
from smartrooms.schemas.booking import BookingCreate, BookingUpdate
from smartrooms.utils.authorization import MODERATOR_ONLY, authorize
from smartrooms.utils.scheduler import find_overlapping_booking
from smartrooms.utils.validation_helpers import validate_date_order

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(self, db: Session, reject_overlaps: bool = False):
        self.db = db
        self.reject_overlaps = reject_overlaps

    def _check_room(self, room_id: int) -> Room:
        room = self.db.get(Room, room_id)
        if room is None:
            logger.error(f"Room not found: {room_id}")
            raise NotFound("Room not found.")
        return room

    def _check_dates(self, booking: Booking, exclude_booking_id=None):
        try:
            validate_date_order(booking.start_date, booking.end_date)
        except ValueError as e:
            raise InvalidInput(str(e))

        if self.reject_overlaps:
            overlapping = find_overlapping_booking(
                self.db, booking.room_id, booking.start_date, booking.end_date, exclude_booking_id
            )
            if overlapping is not None:
                logger.error(
                    f"Overlapping booking {overlapping.id} for room_id: {booking.room_id}, "
                    f"time: {booking.start_date} to {booking.end_date}"
                )
                raise InvalidInput("Room is already booked for this time slot")

    def _load_users(self, user_ids: Iterable[int]) -> List[User]:
        """Fetch every requested user or fail without touching anything."""
        wanted = set(user_ids)
        users = self.db.query(User).filter(User.id.in_(wanted)).all() if wanted else []
        if len(users) != len(wanted):
            missing = wanted - {user.id for user in users}
            logger.error(f"Users not found: {sorted(missing)}")
            raise NotFound("One or more users not found.")
        return users

    def get(self, booking_id: int) -> Booking:
        booking = self.db.get(Booking, booking_id)
        if booking is None:
            logger.error(f"Booking not found: {booking_id}")
            raise NotFound("Booking not found.")
        return booking

    def create(self, data: BookingCreate, caller: User) -> Booking:
        if data.room_id is None:
            logger.error("Booking without roomId rejected")
            raise InvalidInput("roomId cannot be null.")
        self._check_room(data.room_id)

        if data.is_approved and not authorize(caller.role_names, MODERATOR_ONLY):
            logger.error(f"User {caller.id} tried to create a pre-approved booking")
            raise Forbidden("You are not authorized to approve bookings.")

        booking = Booking(
            room_id=data.room_id,
            start_date=data.start_date,
            end_date=data.end_date,
            purpose=data.purpose,
            is_approved=data.is_approved,
        )
        self._check_dates(booking)
        self.db.add(booking)
        self.db.flush()

        # Ids go straight into the association table; the foreign key rejects unknown users
        user_ids = sorted(set(data.user_ids))
        if user_ids:
            self.db.execute(
                booking_attendees.insert(),
                [{"booking_id": booking.id, "user_id": user_id} for user_id in user_ids],
            )
        self.db.commit()
        self.db.refresh(booking)
        logger.debug(f"Created booking: {booking.id}, room_id: {booking.room_id}, attendees: {user_ids}")
        return booking

    def update(self, booking_id: int, data: BookingUpdate):
        update_data = data.model_dump(exclude_unset=True)
        user_ids = update_data.pop("user_ids", None)

        booking = self.db.get(Booking, booking_id)
        if booking is None or not (update_data or user_ids):
            logger.error(f"Booking not updated: {booking_id}")
            raise NotFound(
                "Unable to update the booking with the specified ID. "
                "Booking not found or empty data provided."
            )

        if update_data.get("room_id") is not None:
            self._check_room(update_data["room_id"])
        for key, value in update_data.items():
            if value is not None:
                setattr(booking, key, value)
        self._check_dates(booking, exclude_booking_id=booking.id)

        # Fields and attendee set commit together; an empty list keeps the attendees
        if user_ids:
            booking.users = self._load_users(user_ids)
        self.db.commit()
        logger.debug(f"Updated booking: {booking_id}, fields: {sorted(update_data)}")

    def delete(self, booking_id: int):
        deleted = self.db.query(Booking).filter(Booking.id == booking_id).delete()
        if deleted != 1:
            self.db.rollback()
            logger.error(f"Booking not found: {booking_id}")
            raise NotFound("Unable to delete the booking with the specified ID. Booking not found.")
        self.db.commit()
        logger.debug(f"Deleted booking: {booking_id}")

    def approve(self, booking_id: int, caller_id: int):
        booking = self.get(booking_id)

        caller = self.db.get(User, caller_id)
        if caller is None or not authorize(caller.role_names, MODERATOR_ONLY):
            logger.error(f"User {caller_id} not authorized to approve booking {booking_id}")
            raise Forbidden("You are not authorized to approve bookings.")

        booking.is_approved = True
        self.db.commit()
        logger.debug(f"Approved booking: {booking_id} by user: {caller_id}")

    def list(self) -> List[Booking]:
        return (
            self.db.query(Booking)
            .options(selectinload(Booking.room), selectinload(Booking.users))
            .order_by(Booking.id)
            .all()
        )

    def attendees(self, booking_id: int) -> List[User]:
        return sorted(self.get(booking_id).users, key=lambda user: user.id)

    def add_attendees(self, booking_id: int, user_ids: Iterable[int]):
        booking = self.get(booking_id)
        users = self._load_users(user_ids)
        linked = {user.id for user in booking.users}
        booking.users.extend(user for user in users if user.id not in linked)
        self.db.commit()
        logger.debug(f"Added users {sorted(user.id for user in users)} to booking: {booking_id}")

    def remove_attendee(self, booking_id: int, user_id: int):
        booking = self.get(booking_id)
        user = self.db.get(User, user_id)
        if user is None:
            logger.error(f"User not found: {user_id}")
            raise NotFound("User not found.")
        if user not in booking.users:
            logger.error(f"User {user_id} is not an attendee of booking {booking_id}")
            raise InvalidInput("User is not associated with the booking.")

        booking.users.remove(user)
        self.db.commit()
        logger.debug(f"Removed user {user_id} from booking: {booking_id}")
