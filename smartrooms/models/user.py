from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from smartrooms.db import Base
from smartrooms.models.booking import booking_attendees
from smartrooms.models.role import user_roles


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    position = Column(String, nullable=True)
    picture = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)

    roles = relationship("Role", secondary=user_roles, back_populates="users")
    bookings = relationship("Booking", secondary=booking_attendees, back_populates="users")

    @property
    def role_names(self):
        return {role.name for role in self.roles}
