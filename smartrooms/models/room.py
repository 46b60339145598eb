from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String
from smartrooms.db import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    image = Column(String, nullable=False)
    floor = Column(String, nullable=False)
    point_of_contact_email = Column(String, nullable=False)
    point_of_contact_phone = Column(String, nullable=False)

    bookings = relationship(
        "Booking", back_populates="room", cascade="all, delete-orphan"
    )
