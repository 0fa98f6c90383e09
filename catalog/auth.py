"""Credential check against the fixed in-memory user list.

Passwords are compared in plaintext and the issued token is a stable
signature of the user id: it never expires and cannot be revoked. This is a
placeholder for a real authentication layer, not one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable

from itsdangerous import BadSignature, URLSafeSerializer

from .errors import InvalidCredentials


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password: str
    role: str


@dataclass(frozen=True)
class Session:
    id: str
    username: str
    role: str
    token: str

    def to_dict(self) -> dict:
        return asdict(self)


class CredentialCheck:
    def __init__(self, users: Iterable[User], secret_key: str) -> None:
        self._users = tuple(users)
        self._serializer = URLSafeSerializer(secret_key, salt="catalog-auth-token")

    def authenticate(self, username: str, password: str) -> Session:
        for user in self._users:
            if user.username == username and user.password == password:
                return Session(
                    id=user.id,
                    username=user.username,
                    role=user.role,
                    token=self._serializer.dumps(user.id),
                )
        raise InvalidCredentials()

    def user_id_for(self, token: str) -> str | None:
        """Return the user id carried by ``token``, or ``None`` if it is not ours."""

        try:
            return str(self._serializer.loads(token))
        except BadSignature:
            return None
