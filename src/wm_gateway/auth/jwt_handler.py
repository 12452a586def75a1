"""JWT access-token verification.

Tokens are issued by the external identity provider, which shares JWT_SECRET
with this service (HS256). This module only verifies them; there is no
login, refresh, or revocation here.

Expected claims:
    sub:  user id (retailer or wholesaler id)
    role: "retailer" | "wholesaler"
    type: "access"
"""

from jose import JWTError, jwt

from config.settings import settings
from src.wm_common.errors import InvalidCredentialsError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"


def decode_token(token: str) -> dict[str, str]:
    """Decode and validate an access token.

    Raises:
        InvalidCredentialsError: Token invalid, expired, or not an access token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidCredentialsError() from None

    if payload.get("type") != "access":
        raise InvalidCredentialsError()
    return payload
