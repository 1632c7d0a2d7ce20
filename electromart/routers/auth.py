"""
Auth Router

Email/password registration and login. Login returns a bearer token for the
Authorization header.
"""
from fastapi import APIRouter, Depends, Header

from electromart.auth import create_web_session, revoke_web_session, verify_session
from electromart.errors import ElectroMartError
from electromart.services.database import get_database
from .deps import to_http_exception
from .models import CredentialsRequest

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(request: CredentialsRequest):
    db = get_database()
    try:
        user = await db.register(request.email, request.password)
    except ElectroMartError as e:
        raise to_http_exception(e)
    return {"message": "User registered successfully", "user": user.model_dump()}


@router.post("/login")
async def login(request: CredentialsRequest):
    db = get_database()
    try:
        user = await db.authenticate(request.email, request.password)
    except ElectroMartError as e:
        raise to_http_exception(e)
    return {"session_token": create_web_session(user), "user": user.model_dump()}


@router.get("/me")
async def me(user=Depends(verify_session)):
    return user.model_dump()


@router.post("/logout")
async def logout(
    authorization: str = Header(None, alias="Authorization"),
    user=Depends(verify_session),
):
    revoke_web_session(authorization.split(" ", 1)[1])
    return {"success": True}
