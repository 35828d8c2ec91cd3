"""
HeartSpace - Account HTTP API

Endpoints:
- POST /auth/signup: Create an account
- POST /auth/login: Exchange credentials for a bearer token
- POST /auth/logout: Revoke the current token
- GET /auth/me: Current user
"""

from typing import Optional, Tuple

from fastapi import Depends, FastAPI
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from heartspace.common.errors import AuthenticationError, ValidationError
from .engine import AccountService, User


class SignupRequest(BaseModel):
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="Password")
    confirm_password: Optional[str] = Field(None, description="Must match password when given")


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: str


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse


_bearer = HTTPBearer(auto_error=False)


def auth_dependencies(accounts: AccountService) -> Tuple:
    """Build (token, optional_user, current_user) dependencies bound to ``accounts``."""

    async def bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> Optional[str]:
        return credentials.credentials if credentials else None

    async def optional_user(token: Optional[str] = Depends(bearer_token)) -> Optional[User]:
        return await accounts.get_current_user(token)

    async def current_user(user: Optional[User] = Depends(optional_user)) -> User:
        if user is None:
            raise AuthenticationError("You need to be signed in to do that")
        return user

    return bearer_token, optional_user, current_user


def register_routes(app: FastAPI, accounts: AccountService, bearer_token, current_user) -> None:
    """Register account routes on the app."""

    @app.post("/auth/signup", response_model=UserResponse, status_code=201)
    async def signup(request: SignupRequest):
        if request.confirm_password is not None and request.confirm_password != request.password:
            raise ValidationError("Please make sure both passwords are identical")
        user = await accounts.sign_up(request.name, request.email, request.password)
        return UserResponse(**user.to_dict())

    @app.post("/auth/login", response_model=LoginResponse)
    async def login(request: LoginRequest):
        user, token = await accounts.sign_in(request.email, request.password)
        return LoginResponse(token=token, user=UserResponse(**user.to_dict()))

    @app.post("/auth/logout", status_code=204)
    async def logout(token: Optional[str] = Depends(bearer_token), user: User = Depends(current_user)):
        await accounts.sign_out(token)

    @app.get("/auth/me", response_model=UserResponse)
    async def me(user: User = Depends(current_user)):
        return UserResponse(**user.to_dict())
