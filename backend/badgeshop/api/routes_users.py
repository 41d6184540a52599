import os
import re
import uuid

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from badgeshop.api.deps import user_id_from_request
from badgeshop.config import settings
from badgeshop.db import get_db
from badgeshop.repositories.user_repo import UserRepository
from badgeshop.schemas.auth_schema import UpdateProfileIn
from badgeshop.services.auth_service import AuthError, AuthService, user_profile
from badgeshop.utils.log import get_logger

router = APIRouter(tags=["users"])
log = get_logger("users")

LOGIN_URL = "/account/login"


@router.get("/users/profile", summary="Profile of the signed-in user")
def get_profile(request: Request, db: Session = Depends(get_db)):
    user_id = user_id_from_request(request)
    if not user_id:
        raise HTTPException(
            status_code=401,
            detail={"error": "User not authenticated. Please sign in", "redirectUrl": LOGIN_URL},
        )
    user = UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user_profile(user)


@router.post("/update-profile", summary="Update name, email and optionally password")
def update_profile(payload: UpdateProfileIn, db: Session = Depends(get_db)):
    svc = AuthService(db)
    try:
        user = svc.update_profile(
            payload.user_id,
            payload.first_name,
            payload.last_name,
            payload.email,
            payload.current_password,
            payload.new_password,
        )
    except AuthError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return {"message": "Profile updated successfully", "user": user_profile(user)}


def _safe_filename(name: str) -> str:
    return re.sub(r"\s+", "-", os.path.basename(name or "image"))


@router.post("/upload-profile-image", summary="Upload a profile picture")
async def upload_profile_image(
    profileImage: UploadFile = File(None),
    userId: str = Form(None),
    db: Session = Depends(get_db),
):
    if profileImage is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not userId:
        raise HTTPException(status_code=400, detail="User ID is required")
    if not (profileImage.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="File must be an image")

    data = await profileImage.read()
    if len(data) > settings.PROFILE_IMAGE_MAX_BYTES:
        raise HTTPException(status_code=400, detail="File size exceeds 2MB limit")

    filename = f"{userId}-{uuid.uuid4()}-{_safe_filename(profileImage.filename)}"
    target_dir = os.path.join(settings.UPLOAD_DIR, "profiles")
    os.makedirs(target_dir, exist_ok=True)

    if not UserRepository(db).get(userId):
        raise HTTPException(status_code=404, detail="User not found")

    with open(os.path.join(target_dir, filename), "wb") as fh:
        fh.write(data)
    image_url = f"/uploads/profiles/{filename}"
    AuthService(db).set_profile_image(userId, image_url)
    log.info(f"Stored profile image for user {userId}: {filename}")
    return {"success": True, "message": "Profile image uploaded successfully", "imageUrl": image_url}
