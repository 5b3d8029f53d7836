# storefront/api/errors.py
from fastapi import HTTPException

from storefront.domain.errors import StorefrontError

ERROR_CODE_HEADER = "X-Error-Code"


def http_error(status_code: int, e: Exception) -> HTTPException:
    """HTTPException z nazwa bledu domenowego w naglowku (RemoteCart odtwarza wyjatek)."""
    headers = {ERROR_CODE_HEADER: type(e).__name__} if isinstance(e, StorefrontError) else None
    return HTTPException(status_code=status_code, detail=str(e), headers=headers)
