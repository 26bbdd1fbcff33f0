from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from dentalbill.api.deps import DENTIST_COOKIE, get_current_dentist, oauth2_scheme
from dentalbill.core.config import settings
from dentalbill.db.models import Dentist
from dentalbill.db.session import get_session
from dentalbill.schemas.auth import DentistInfo, LoginRequest, LoginResponse, SignupRequest
from dentalbill.services.auth_service import AuthService

router = APIRouter()

def remember_dentist(response: Response, login: LoginResponse) -> LoginResponse:
    response.set_cookie(
        DENTIST_COOKIE,
        str(login.dentist.id),
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return login

@router.post("/signup", response_model=LoginResponse)
async def signup(
    data: SignupRequest,
    response: Response,
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return remember_dentist(response, await service.signup(data))

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session)
):
    service = AuthService(session)
    return remember_dentist(response, await service.login(login_data))

@router.post("/logout")
async def logout(
    response: Response,
    token: str = Depends(oauth2_scheme),
    dentist: Dentist = Depends(get_current_dentist),
    session: AsyncSession = Depends(get_session)
):
    await AuthService(session).logout(token)
    response.delete_cookie(DENTIST_COOKIE)
    return {"success": True}

@router.get("/me", response_model=DentistInfo)
async def read_me(dentist: Dentist = Depends(get_current_dentist)):
    return dentist
