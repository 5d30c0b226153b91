# pharma_ledger/core/auth_deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from pharma_ledger.core.security import decode_token
from pharma_ledger.policies.access_control import Caller

bearer = HTTPBearer(auto_error=True)


def get_current_caller(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> Caller:
    """
    Canonical caller-identity dependency.

    Guarantees only that the JWT is valid and names a caller address.
    Whether that caller may do anything is decided later by the
    AccessControlGuard against the participant registry.
    """

    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    address = payload.get("sub")
    if not address:
        raise HTTPException(status_code=401, detail="Token missing subject claim.")

    caller = Caller(address=str(address))

    # Make caller available to downstream middleware / handlers
    request.state.caller = caller

    return caller
