# app/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from supabase import Client

from app.core.supabase_client import get_auth_client
from app.database import get_session
from app.repositories.profile_repo import ProfileRepository
from app.repositories.vendor_repo import VendorApplicationRepository
from app.schemas.auth import AuthResult, RefreshRequest, SignInRequest, SignUpRequest
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService(ProfileRepository(), VendorApplicationRepository())


@router.post(
    "/signup",
    response_model=AuthResult,
    status_code=status.HTTP_201_CREATED,
)
def sign_up(
    payload: SignUpRequest,
    session: Session = Depends(get_session),
    client: Client = Depends(get_auth_client),
):
    """
    Register a consumer or a vendor.

    Vendors must send `business_info`; their account stays pending until
    an admin approves the application. Tokens are empty when Supabase
    requires email confirmation first.
    """
    return service.sign_up(session, client, payload)


@router.post("/signin", response_model=AuthResult)
def sign_in(
    payload: SignInRequest,
    client: Client = Depends(get_auth_client),
):
    return service.sign_in(client, payload)


@router.post("/refresh", response_model=AuthResult)
def refresh(
    payload: RefreshRequest,
    client: Client = Depends(get_auth_client),
):
    """
    Exchange a refresh token for a new access token.
    """
    return service.refresh(client, payload.refresh_token)
