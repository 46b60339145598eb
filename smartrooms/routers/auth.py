from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from smartrooms.db import get_db
from smartrooms.schemas.auth import SigninRequest, SigninResponse, SignupRequest
from smartrooms.schemas.common import Message
from smartrooms.services.auth import AuthService

router = APIRouter(
    prefix="/api/auth",
    tags=["auth"],
)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/signup", response_model=Message)
def signup(payload: SignupRequest, service: AuthService = Depends(get_auth_service)):
    """
    Register a new account.

    - **roles**: optional role names (USER, MODERATOR, ADMIN); USER when omitted.
    """
    service.signup(payload)
    return {"message": "User was registered successfully!"}


@router.post("/signin", response_model=SigninResponse)
def signin(payload: SigninRequest, service: AuthService = Depends(get_auth_service)):
    """
    Exchange email and password for an access token valid for 24 hours.
    Send it back in the `x-access-token` header.
    """
    return service.signin(payload.email, payload.password)


@router.post("/logout", response_model=Message)
def logout(response: Response):
    """
    Clear the client side token. Tokens are not revoked server side and stay
    valid until they expire.
    """
    response.delete_cookie("accessToken")
    response.headers["Authorization"] = ""
    return {"message": "Logout successful!"}
