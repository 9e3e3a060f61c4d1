"""
Aura Coach — Local account store.

Accounts live in a `users` collection; the signed-in account is mirrored
under `auth_user`. Emails are compared after trimming and lower-casing.
Password storage is delegated to a CredentialPolicy, and callers only ever
see `User` records, which carry no password.
"""

from __future__ import annotations

import json
import logging

from aura.adapters.credentials import PlaintextCredentials
from aura.data.models import PLAN_FREE, PLAN_PRO, User
from aura.data.stores import JsonStore, new_id
from aura.ports.credential_port import CredentialPolicy
from aura.ports.storage_port import KeyValueStore

logger = logging.getLogger(__name__)

USERS_KEY = "users"
SESSION_KEY = "auth_user"


class AuthError(Exception):
    """Raised on failed sign-in or invalid account data."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _user_from_record(record: dict) -> User:
    return User(
        id=str(record["id"]),
        email=record["email"],
        name=record.get("name", ""),
        plan=record.get("plan", PLAN_FREE),
    )


def _user_to_dict(user: User) -> dict:
    return {"id": user.id, "email": user.email, "name": user.name, "plan": user.plan}


class AuthStore(JsonStore):
    """Registration, sign-in and the persisted current session."""

    def __init__(
        self, kv: KeyValueStore, credentials: CredentialPolicy | None = None,
    ) -> None:
        super().__init__(kv)
        self._credentials = credentials or PlaintextCredentials()

    async def _records(self) -> list[dict]:
        data = await self._read_json(USERS_KEY)
        if not isinstance(data, list):
            return []
        return [
            r for r in data
            if isinstance(r, dict) and isinstance(r.get("email"), str) and "id" in r
        ]

    async def _set_session(self, user: User) -> None:
        await self._kv.set(SESSION_KEY, json.dumps(_user_to_dict(user)))

    async def register(self, name: str, email: str, password: str) -> User:
        """Create an account and sign it in."""
        name = name.strip()
        email = normalize_email(email)
        if not name or not email or not password:
            raise AuthError("Please fill all fields")

        async with self._lock(USERS_KEY):
            records = await self._records()
            if any(normalize_email(r["email"]) == email for r in records):
                raise AuthError("An account with this email already exists")

            user = User(id=new_id(), email=email, name=name, plan=PLAN_FREE)
            record = _user_to_dict(user)
            record["password"] = self._credentials.encode(password)
            records.append(record)
            await self._write_json(USERS_KEY, records)

        await self._set_session(user)
        logger.info("User registered: %s", user.id)
        return user

    async def login(self, email: str, password: str) -> User:
        email = normalize_email(email)
        if not email or not password:
            raise AuthError("Invalid credentials")

        for record in await self._records():
            if normalize_email(record["email"]) != email:
                continue
            if self._credentials.verify(password, str(record.get("password", ""))):
                user = _user_from_record(record)
                await self._set_session(user)
                logger.info("User %s signed in", user.id)
                return user
            break

        logger.warning("Failed sign-in attempt")
        raise AuthError("Invalid credentials")

    async def logout(self) -> None:
        await self._kv.remove(SESSION_KEY)
        logger.info("Session cleared")

    async def current_user(self) -> User | None:
        """Return the signed-in user, or None if absent or unreadable."""
        data = await self._read_json(SESSION_KEY)
        if not isinstance(data, dict):
            return None
        try:
            return _user_from_record(data)
        except KeyError:
            logger.warning("Malformed session record, ignoring")
            return None

    async def _update_current(self, **changes: str) -> User:
        """Apply field changes to the signed-in account and its session."""
        current = await self.current_user()
        if current is None:
            raise AuthError("No user logged in")

        async with self._lock(USERS_KEY):
            records = await self._records()
            for record in records:
                if str(record["id"]) == current.id:
                    record.update(changes)
                    break
            await self._write_json(USERS_KEY, records)

        updated = User(
            id=current.id,
            email=changes.get("email", current.email),
            name=changes.get("name", current.name),
            plan=changes.get("plan", current.plan),
        )
        await self._set_session(updated)
        return updated

    async def update_name(self, name: str) -> User:
        name = name.strip()
        if not name:
            raise AuthError("Name cannot be empty")
        user = await self._update_current(name=name)
        logger.info("User %s renamed", user.id)
        return user

    async def update_email(self, email: str) -> User:
        email = normalize_email(email)
        if not email:
            raise AuthError("Email cannot be empty")
        current = await self.current_user()
        if current is None:
            raise AuthError("No user logged in")
        for record in await self._records():
            if normalize_email(record["email"]) == email and str(record["id"]) != current.id:
                raise AuthError("An account with this email already exists")
        user = await self._update_current(email=email)
        logger.info("User %s changed email", user.id)
        return user

    async def update_password(self, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise AuthError("Invalid password data")
        user = await self.current_user()
        if user is None:
            raise AuthError("No user logged in")

        for record in await self._records():
            if str(record["id"]) == user.id:
                if not self._credentials.verify(current_password, str(record.get("password", ""))):
                    raise AuthError("Current password is incorrect")
                break
        else:
            raise AuthError("No user logged in")

        await self._update_current(password=self._credentials.encode(new_password))
        logger.info("Password updated for user %s", user.id)

    async def set_plan(self, plan: str) -> User:
        if plan not in (PLAN_FREE, PLAN_PRO):
            raise ValueError(f"Unknown plan: {plan!r}")
        user = await self._update_current(plan=plan)
        logger.info("User %s moved to plan %s", user.id, plan)
        return user
