import enum
from sqlalchemy import Column, Enum, ForeignKey, Integer, Table
from sqlalchemy.orm import relationship
from smartrooms.db import Base


class RoleName(str, enum.Enum):
    USER = "USER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"

    @property
    def authority(self) -> str:
        """Name as reported to clients on signin, e.g. ``ROLE_ADMIN``."""
        return f"ROLE_{self.value}"


ROLE_IDS = {
    RoleName.USER: 1,
    RoleName.MODERATOR: 2,
    RoleName.ADMIN: 3,
}


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(Enum(RoleName, native_enum=False), unique=True, nullable=False)

    users = relationship("User", secondary=user_roles, back_populates="roles")
