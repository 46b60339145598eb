import logging
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from smartrooms.errors import Forbidden, NotFound
from smartrooms.models.booking import Booking
from smartrooms.models.role import Role, RoleName
from smartrooms.models.user import User
from smartrooms.schemas.user import UserCreate, UserUpdate, UserWithRoles
from smartrooms.utils.auth import get_password_hash
from smartrooms.utils.authorization import ADMIN_ONLY, authorize

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def resolve_roles(self, names: Optional[Iterable[RoleName]]) -> List[Role]:
        """Look up roles by name, falling back to USER when none are given."""
        wanted = set(names or []) or {RoleName.USER}
        return self.db.query(Role).filter(Role.name.in_(wanted)).all()

    def create(self, data: UserCreate) -> User:
        user = User(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            position=data.position,
            picture=data.picture,
            hashed_password=get_password_hash(data.password),
        )
        user.roles = self.resolve_roles(data.roles)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.debug(f"Created user: {user.id}, roles: {sorted(user.role_names)}")
        return user

    def list(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def get(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            logger.error(f"User not found: {user_id}")
            raise NotFound("User does not exist!")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def info(self, user_id: int) -> UserWithRoles:
        """Profile with role names flattened onto it."""
        user = self.get(user_id)
        return UserWithRoles(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            position=user.position,
            picture=user.picture,
            roles=sorted(user.role_names),
        )

    def update(self, user_id: int, data: UserUpdate, caller: User) -> User:
        user = self.get(user_id)
        update_data = data.model_dump(exclude_unset=True)

        roles = update_data.pop("roles", None)
        if roles is not None:
            if not authorize(caller.role_names, ADMIN_ONLY):
                logger.error(f"User {caller.id} tried to change roles of user {user_id}")
                raise Forbidden("Require Admin Role!")
            user.roles = self.resolve_roles(roles)

        password = update_data.pop("password", None)
        if password:
            user.hashed_password = get_password_hash(password)

        for key, value in update_data.items():
            setattr(user, key, value)
        self.db.commit()
        self.db.refresh(user)
        logger.debug(f"Updated user: {user_id}")
        return user

    def delete(self, user_id: int):
        user = self.get(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.debug(f"Deleted user: {user_id}")

    def bookings(self, user_id: int) -> List[Booking]:
        return sorted(self.get(user_id).bookings, key=lambda booking: booking.id)
