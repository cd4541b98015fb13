"""
# `app/core/security.py` - Callable guard

Callables are open by default. When `CALLABLES_REQUIRED_ROLE` is set, every callable requires
`Authorization: Bearer <Firebase ID token>` and the token's `role` custom claim must equal
the configured role.

- No token / invalid token -> `401 Unauthorized`
- Valid token, different role -> `403 Forbidden`
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import Settings, get_settings
from app.core.clients import Clients, get_clients

# HTTPBearer is a FastAPI provided security scheme for "Authorization: Bearer <token>" header
oauth2_scheme = HTTPBearer(auto_error=False)


def require_callable_role(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_settings),
    clients: Clients = Depends(get_clients),
) -> Optional[dict]:
    """Returns the decoded token when the guard is active, otherwise None."""
    required = settings.callables_required_role
    if not required:
        return None

    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication credentials were not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        # check_revoked=True -> tokens issued before a logout/role change are rejected
        decoded = clients.auth.verify_id_token(credentials.credentials, check_revoked=True)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if decoded.get("role") != required:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Role '{required}' required",
        )
    return decoded
