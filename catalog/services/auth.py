import logging

from pydantic import ValidationError

from catalog.core.api_client import CatalogAPIClient
from catalog.core.errors import FormValidationError, RemoteError
from catalog.core.session import SessionContext
from catalog.schemas.auth import AuthResponse, LoginForm, LoginRequest, RegisterRequest, SignupForm, User
from catalog.services.validation import raise_for_fields, validate_login, validate_signup

logger = logging.getLogger(__name__)


def _parse_auth_response(data, fallback: str) -> AuthResponse:
    try:
        return AuthResponse.model_validate(data)
    except ValidationError:
        logger.error(f"Malformed auth response: {data}")
        raise RemoteError(fallback)


async def signup(client: CatalogAPIClient, session: SessionContext, form: SignupForm) -> User:
    raise_for_fields(validate_signup(form))

    try:
        request = RegisterRequest(username=form.username, email=form.email, password=form.password)
    except ValidationError:
        raise FormValidationError({"email": "Please enter a valid email"})

    data = await client.register(request.username, request.email, request.password)
    auth = _parse_auth_response(data, "Signup failed. Please try again.")
    session.set(auth.user, auth.token)
    logger.info(f"Signup completed for {request.email}")
    return auth.user


async def login(client: CatalogAPIClient, session: SessionContext, form: LoginForm) -> User:
    raise_for_fields(validate_login(form))

    try:
        request = LoginRequest(email=form.email, password=form.password)
    except ValidationError:
        raise FormValidationError({"email": "Please enter a valid email"})

    data = await client.login(request.email, request.password)
    auth = _parse_auth_response(data, "Login failed. Please try again.")
    session.set(auth.user, auth.token)
    return auth.user


async def logout(client: CatalogAPIClient, session: SessionContext) -> None:
    try:
        await client.logout(token=session.token)
    except RemoteError as e:
        logger.warning(f"Remote logout failed, clearing local session anyway: {e.message}")
    session.clear()
