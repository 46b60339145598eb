import logging
from typing import List
from sqlalchemy.orm import Session
from smartrooms.errors import InvalidInput, NotFound
from smartrooms.models.booking import Booking
from smartrooms.models.room import Room
from smartrooms.schemas.room import RoomCreate, RoomUpdate

logger = logging.getLogger(__name__)


class RoomService:
    def __init__(self, db: Session, delete_cascade: bool = True):
        self.db = db
        self.delete_cascade = delete_cascade

    def create(self, data: RoomCreate) -> Room:
        room = Room(**data.model_dump())
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        logger.debug(f"Created room: {room.id}")
        return room

    def list(self) -> List[Room]:
        return self.db.query(Room).order_by(Room.id).all()

    def get(self, room_id: int) -> Room:
        room = self.db.get(Room, room_id)
        if room is None:
            logger.error(f"Room not found: {room_id}")
            raise NotFound("Room not found with the specified ID.")
        return room

    def update(self, room_id: int, data: RoomUpdate):
        update_data = data.model_dump(exclude_unset=True)
        updated = 0
        if update_data:
            updated = self.db.query(Room).filter(Room.id == room_id).update(update_data)
        if updated != 1:
            self.db.rollback()
            logger.error(f"Room not updated: {room_id}, fields: {sorted(update_data)}")
            raise NotFound(
                "Unable to update the room with the specified ID. "
                "Room not found or empty data provided."
            )
        self.db.commit()
        logger.debug(f"Updated room: {room_id}")

    def delete(self, room_id: int):
        room = self.db.get(Room, room_id)
        if room is None:
            logger.error(f"Room not found: {room_id}")
            raise NotFound("Unable to delete the room with the specified ID. Room not found.")

        if room.bookings and not self.delete_cascade:
            logger.error(f"Room {room_id} still has {len(room.bookings)} bookings")
            raise InvalidInput("Room has existing bookings.")

        # Cascades through Room.bookings, taking attendee links with them
        self.db.delete(room)
        self.db.commit()
        logger.debug(f"Deleted room: {room_id}")

    def bookings(self, room_id: int) -> List[Booking]:
        return (
            self.db.query(Booking)
            .filter(Booking.room_id == room_id)
            .order_by(Booking.id)
            .all()
        )
