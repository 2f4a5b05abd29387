import logging
from typing import Any, MutableMapping, Optional

from catalog.schemas.auth import User

logger = logging.getLogger(__name__)


class SessionContext:
    """Current user and token, passed explicitly to whoever needs them."""

    USER_KEY = "user"
    TOKEN_KEY = "token"

    def __init__(self, store: Optional[MutableMapping[str, Any]] = None):
        self.store = store if store is not None else {}

    @property
    def user(self) -> Optional[User]:
        data = self.store.get(self.USER_KEY)
        return User.model_validate(data) if data else None

    @property
    def token(self) -> Optional[str]:
        return self.store.get(self.TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set(self, user: User, token: str) -> None:
        self.store[self.USER_KEY] = user.model_dump()
        self.store[self.TOKEN_KEY] = token
        logger.info(f"Session started for user: {user.email}")

    def clear(self) -> None:
        user = self.store.get(self.USER_KEY) or {}
        self.store.pop(self.USER_KEY, None)
        self.store.pop(self.TOKEN_KEY, None)
        logger.info(f"Session cleared for user: {user.get('email')}")


class ScreenGuard:
    """
    Generation counter for requests issued by one screen.

    begin() hands out a token before a remote call. close() invalidates all
    outstanding tokens, so responses that arrive after the screen is gone
    fail accept() and are discarded.
    """

    def __init__(self, name: str = "screen"):
        self.name = name
        self.generation = 0
        self.closed = False

    def begin(self) -> int:
        self.generation += 1
        return self.generation

    def accept(self, token: int) -> bool:
        if self.closed or token != self.generation:
            logger.warning(
                f"Discarding stale response for {self.name}: token={token}, "
                f"generation={self.generation}, closed={self.closed}"
            )
            return False
        return True

    def close(self) -> None:
        self.closed = True
        self.generation += 1
