import logging
from fastapi import APIRouter, Depends, status

from catalog.api.dependencies import get_client, get_session, require_session
from catalog.core.api_client import CatalogAPIClient
from catalog.core.session import SessionContext
from catalog.schemas.auth import LoginForm, SignupForm, User
from catalog.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(
    form: SignupForm,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(get_session),
):
    logger.info(f"Received registration request for email: {form.email}")
    return await auth_service.signup(client, session, form)


@router.post("/login", response_model=User)
async def login(
    form: LoginForm,
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(get_session),
):
    return await auth_service.login(client, session, form)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    client: CatalogAPIClient = Depends(get_client),
    session: SessionContext = Depends(get_session),
):
    await auth_service.logout(client, session)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=User)
async def me(session: SessionContext = Depends(require_session)):
    return session.user
