from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship
from smartrooms.db import Base


booking_attendees = Table(
    "booking_attendees",
    Base.metadata,
    Column("booking_id", Integer, ForeignKey("bookings.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id"), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    purpose = Column(String, nullable=False)
    is_approved = Column(Boolean, nullable=False, default=False)

    room = relationship("Room", back_populates="bookings")
    users = relationship("User", secondary=booking_attendees, back_populates="bookings")
