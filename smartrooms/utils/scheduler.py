from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from smartrooms.models.booking import Booking


def find_overlapping_booking(
    db: Session,
    room_id: int,
    start_date: datetime,
    end_date: datetime,
    exclude_booking_id: Optional[int] = None,
) -> Optional[Booking]:
    """
    Return a booking of the room whose time range intersects [start_date, end_date).
    """
    query = db.query(Booking).filter(
        Booking.room_id == room_id,
        Booking.start_date < end_date,
        Booking.end_date > start_date,
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.first()
