# app/api/v1/endpoints/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import schemas
from app import crud
from app.api.v1 import deps
from app.core.security import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    user_in: schemas.UserRegister,
):
    """
    Create an account, seed its default categories and return a token.
    """
    try:
        if await crud.crud_user.get_user_by_email(db, email=user_in.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User with this email already exists")
        user = await crud.crud_user.create_user(db, user_in=user_in)
        return {
            "message": "User created successfully",
            "token": create_access_token(user.id),
            "user": user,
        }
    except HTTPException:
        raise
    except Exception:
        logger.exception("Registration error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not register user")


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    *,
    db: AsyncSession = Depends(deps.get_async_db),
    credentials: schemas.UserLogin,
):
    try:
        user = await crud.crud_user.authenticate(db, email=credentials.email, password=credentials.password)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return {"message": "Login successful", "token": create_access_token(user.id), "user": user}
    except HTTPException:
        raise
    except Exception:
        logger.exception("Login error")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Could not log in")


@router.post("/logout", response_model=schemas.Message)
async def logout():
    # Tokens are stateless; the client just drops it
    return {"message": "Logout successful"}
