# routers/auth.py
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException

from deps.auth import check_admin_credentials, create_access_token, require_admin
from schemas.auth import LoginRequest, LoginResponse, VerifyTokenResponse

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(req: LoginRequest):
    if not check_admin_credentials(req.username, req.password):
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return LoginResponse(token=create_access_token(req.username))


@router.get("/verify-token", response_model=VerifyTokenResponse)
def verify_token(claims: Annotated[dict[str, Any], Depends(require_admin)]):
    return VerifyTokenResponse(valid=True, user=claims)
