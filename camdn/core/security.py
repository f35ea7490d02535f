"""Shared-secret check for the write endpoints."""
import hmac

from fastapi import Header, HTTPException, Request, status


async def require_api_key(request: Request, authorization: str | None = Header(default=None)) -> None:
    """Compare the raw ``Authorization`` header against ``API_KEY``.

    An unset key rejects everything. Missing and wrong headers get the same
    response.
    """
    expected = request.app.state.container.settings.api_key
    if not expected or not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    if not hmac.compare_digest(authorization.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
