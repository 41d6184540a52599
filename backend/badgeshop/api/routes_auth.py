from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from badgeshop.db import get_db
from badgeshop.schemas.auth_schema import LoginIn, RegisterIn, ResetPasswordConfirmIn, ResetPasswordIn
from badgeshop.services.auth_service import AuthError, AuthService

router = APIRouter(tags=["auth"])

RESET_MESSAGE = "If an account exists for that email, a password reset link has been sent"


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Create a customer account")
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        user = svc.register(payload.first_name, payload.last_name, payload.email, payload.password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "User registered successfully", "userId": user.id, "role": user.role}


@router.post("/login", summary="Exchange credentials for an access token")
def login(payload: LoginIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        return svc.login(payload.email, payload.password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))


@router.post("/reset-password", summary="Request a password reset link")
def reset_password(payload: ResetPasswordIn, db: Session = Depends(get_db)):
    AuthService(db).request_password_reset(payload.email)
    # same answer for known and unknown addresses
    return {"message": RESET_MESSAGE}


@router.post("/reset-password/confirm", summary="Set a new password with a reset token")
def confirm_reset_password(payload: ResetPasswordConfirmIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        svc.reset_password(payload.token, payload.new_password)
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Password updated successfully"}
