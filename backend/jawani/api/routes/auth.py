"""Login endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, status
from pydantic import BaseModel

from jawani.security import AuthenticationGate, get_authentication_gate, require_basic_user


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginResponse(BaseModel):
    username: str


@router.post("/login", response_model=LoginResponse, summary="Submit login credentials")
async def login(
    username: str = Form(""),
    password: str = Form(""),
    gate: AuthenticationGate = Depends(get_authentication_gate),
) -> LoginResponse:
    result = await gate.submit(username, password)
    if not result.accepted:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.error)
    return LoginResponse(username=result.username)


@router.get("/me", summary="Current user (Basic)")
async def get_me(user: dict = Depends(require_basic_user)) -> dict:
    return user
