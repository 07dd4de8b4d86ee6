from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.core.database import get_db
from travelplan.dependencies.auth import get_current_user
from travelplan.models.user.user import User
from travelplan.schemas.user.user import LoginRequest, MessageResponse, SignupRequest, TokenResponse, UserOut
from travelplan.services.auth import auth as auth_service
from travelplan.services.email_service import send_verification_email

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup", response_model=MessageResponse, status_code=201)
async def signup(
    user: SignupRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    token = await auth_service.register_user(user, db)
    # Delivery problems are logged by the email service and never fail signup
    background_tasks.add_task(send_verification_email, user.email, token)
    return MessageResponse(message="User created successfully. Please check your email to verify your account.")


@router.get("/verify", response_model=MessageResponse)
async def verify(
    token: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    if not token:
        raise HTTPException(status_code=400, detail="Missing verification token")

    await auth_service.verify_email(token, db)
    return MessageResponse(message="Email verified successfully")


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    return await auth_service.login_user(credentials, db)


@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user)):
    return current_user
