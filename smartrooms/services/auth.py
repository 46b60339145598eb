import logging
from sqlalchemy.orm import Session
from smartrooms.errors import InvalidCredentials, NotFound
from smartrooms.models.user import User
from smartrooms.schemas.auth import SigninResponse, SignupRequest
from smartrooms.services.users import UserService
from smartrooms.utils.auth import create_access_token, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserService(db)

    def signup(self, data: SignupRequest) -> User:
        user = self.users.create(data)
        logger.info(f"Registered user {user.id} <{user.email}>")
        return user

    def signin(self, email: str, password: str) -> SigninResponse:
        user = self.users.get_by_email(email)
        if user is None:
            logger.error(f"Signin for unknown email: {email}")
            raise NotFound("User Not found.")

        if not verify_password(password, user.hashed_password):
            logger.error(f"Invalid password for user: {user.id}")
            raise InvalidCredentials()

        return SigninResponse(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            position=user.position,
            picture=user.picture,
            roles=[name.authority for name in sorted(user.role_names)],
            access_token=create_access_token(user.id),
        )
