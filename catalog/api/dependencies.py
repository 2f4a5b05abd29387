from fastapi import Depends, HTTPException, Request, status

from catalog.core.api_client import CatalogAPIClient, catalog_client
from catalog.core.session import SessionContext


def get_client() -> CatalogAPIClient:
    return catalog_client


def get_session(request: Request) -> SessionContext:
    return SessionContext(request.session)


def require_session(session: SessionContext = Depends(get_session)) -> SessionContext:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated. Please log in.",
        )
    return session
