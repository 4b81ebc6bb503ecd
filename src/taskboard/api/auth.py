"""Auth API — registration, login, current user.

Learn: Routes for user authentication:
- POST /auth/register → create an account, returns a token right away
- POST /auth/login → email/password → token
- GET /auth/me → who the bearer token belongs to

There is no logout route. Tokens are stateless; logging out means the
client throws its token away.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.auth.dependencies import get_current_user
from taskboard.auth.identity import CurrentUser
from taskboard.db.engine import get_db
from taskboard.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserRead,
)
from taskboard.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


def _svc(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_svc)):
    """Create a new user account and log it in."""
    result = await svc.register(
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return AuthResponse(
        message="User registered successfully",
        token=result.token,
        user=UserRead.model_validate(result.user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_svc)):
    """Login with email and password → bearer token."""
    result = await svc.login(email=body.email, password=body.password)
    return AuthResponse(
        message="Login successful",
        token=result.token,
        user=UserRead.model_validate(result.user),
    )


@router.get("/me", response_model=UserRead)
async def get_me(user: CurrentUser = Depends(get_current_user)):
    """Get the current authenticated user's info."""
    return UserRead.model_validate(user)
