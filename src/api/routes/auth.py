"""
Routes: /auth — signup and signin.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_authenticate_use_case, get_register_use_case
from src.api.schemas.requests import LoginRequest, SignupRequest
from src.api.schemas.responses import JwtResponse, MessageResponse
from src.core.use_cases.authenticate_user import AuthenticateUserUseCase
from src.core.use_cases.register_user import RegisterUserUseCase, SignupInput

router = APIRouter()


@router.post("/auth/signin", response_model=JwtResponse)
async def authenticate_user(
    req: LoginRequest,
    use_case: AuthenticateUserUseCase = Depends(get_authenticate_use_case),
):
    """Exchange username + password for a bearer token."""
    result = use_case.execute(req.username, req.password)
    user = result.user
    return JwtResponse(
        token=result.token,
        id=user.id,
        username=user.username,
        email=user.email,
        roles=sorted(r.value for r in user.roles),
    )


@router.post("/auth/signup", response_model=MessageResponse)
async def register_user(
    req: SignupRequest,
    use_case: RegisterUserUseCase = Depends(get_register_use_case),
):
    use_case.execute(SignupInput(
        username=req.username,
        email=req.email,
        password=req.password,
        roles=req.role,
    ))
    return MessageResponse(message="User registered successfully!")
