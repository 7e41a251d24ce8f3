"""User registration and authorisation."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from .message import ServerResponseType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    login: str
    password: str


class AuthManager(ABC):
    """Registers users and checks their credentials."""

    @abstractmethod
    def register(self, user: Any, credentials: Credentials) -> ServerResponseType:
        """Register new credentials and return the response status."""

    @abstractmethod
    def authorize(self, user: Any, credentials: Credentials) -> ServerResponseType:
        """Check credentials and return the response status."""


class SimpleAuthManager(AuthManager):
    """Keeps logins and passwords in memory."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, str] = {}

    def register(self, user: Any, credentials: Credentials) -> ServerResponseType:
        if not credentials.login or not credentials.password:
            return ServerResponseType.INVALID_CREDENTIALS
        with self._lock:
            if credentials.login in self._users:
                return ServerResponseType.ALREADY_EXISTS
            self._users[credentials.login] = credentials.password
        logger.info("Registered user: %s", credentials.login)
        return ServerResponseType.OK

    def authorize(self, user: Any, credentials: Credentials) -> ServerResponseType:
        if not credentials.login or not credentials.password:
            return ServerResponseType.INVALID_CREDENTIALS
        with self._lock:
            stored = self._users.get(credentials.login)
        if stored is None:
            return ServerResponseType.INCORRECT_LOGIN
        if stored != credentials.password:
            return ServerResponseType.INCORRECT_PASSWORD
        logger.info("Authorized user: %s", credentials.login)
        return ServerResponseType.OK