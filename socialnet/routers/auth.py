from fastapi import APIRouter, Depends, HTTPException, status

from socialnet.config import Settings
from socialnet.schemas.user import Token, UserCreate, UserLogin, UserPublic
from socialnet.services.user_service import UserService
from socialnet.utils.dependencies import get_app_settings, get_user_service
from socialnet.utils.errors import ValidationError
from socialnet.utils.security import create_access_token


router = APIRouter(prefix="/users", tags=["auth"])


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
async def register(payload: UserCreate, service: UserService = Depends(get_user_service)):
    try:
        return await service.register_user(payload.full_name, payload.email, payload.password, payload.confirm_password)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))


@router.post("/login", response_model=Token)
async def login(payload: UserLogin, service: UserService = Depends(get_user_service), settings: Settings = Depends(get_app_settings)):
    user = await service.authenticate_user(payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid credentials")
    return Token(access_token=create_access_token(user["_id"], settings), id=user["_id"], profile_photo=user.get("profile_photo"))
