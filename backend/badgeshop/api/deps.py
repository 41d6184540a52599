from typing import Optional

import jwt
from fastapi import Request

from badgeshop.utils.log import get_logger
from badgeshop.utils.security import decode_token

log = get_logger("deps")


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("Authorization") or ""
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return None


def user_id_from_request(request: Request, claimed_id=None) -> Optional[str]:
    """
    Id of the caller: the subject of a valid bearer access token,
    else `claimed_id` (an id sent in the request body),
    else the legacy `userId` cookie. None when none is usable.
    """
    token = bearer_token(request)
    if token:
        try:
            return str(decode_token(token)["sub"])
        except (jwt.PyJWTError, KeyError):
            log.warning("Ignoring invalid bearer token")
    if claimed_id:
        return str(claimed_id)
    return request.cookies.get("userId") or None
