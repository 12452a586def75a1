"""FastAPI dependencies: current principal and role guards.

Usage in any protected router:
    from src.wm_gateway.auth.dependencies import require_retailer

    @router.post("/orders/{order_id}/cancel")
    async def cancel(user: Principal = Depends(require_retailer)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.wm_common.enums import UserRole
from src.wm_common.errors import ForbiddenError, InvalidCredentialsError
from src.wm_gateway.auth.jwt_handler import decode_token

# The token is issued elsewhere; tokenUrl only feeds the Swagger "Authorize" button
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class Principal:
    user_id: str
    role: str


async def get_current_user(token: str = Depends(oauth2_scheme)) -> Principal:
    """Verify the Bearer token and return the caller's identity."""
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in (UserRole.RETAILER, UserRole.WHOLESALER):
        raise _CREDENTIALS_EXCEPTION
    return Principal(user_id=str(user_id), role=str(role))


async def require_retailer(
    current_user: Principal = Depends(get_current_user),
) -> Principal:
    if current_user.role != UserRole.RETAILER:
        raise ForbiddenError("Retailer account required")
    return current_user


async def require_wholesaler(
    current_user: Principal = Depends(get_current_user),
) -> Principal:
    if current_user.role != UserRole.WHOLESALER:
        raise ForbiddenError("Wholesaler account required")
    return current_user
