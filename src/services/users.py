# static credential list used by the login gate
from __future__ import annotations

import asyncio
import json
import os.path
from typing import List, Optional

from services.errors import CredentialsError
from services.models import User
from utils.logger import get_logger

_logger = get_logger(__name__)


def _read_users(path: str) -> List[User]:
    if not os.path.exists(path):
        raise CredentialsError(f"Credential file {path} not found.")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise CredentialsError(f"Credential file {path} is not valid JSON: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialsError(f"Credential file {path} could not be read: {e}") from e

    if not isinstance(raw, list):
        raise CredentialsError(f"Credential file {path} must hold a list of users.")

    users = []
    for i, entry in enumerate(raw):
        if (
            not isinstance(entry, dict)
            or not isinstance(entry.get("username"), str)
            or not isinstance(entry.get("password"), str)
        ):
            raise CredentialsError(f"Credential entry #{i + 1} in {path} is malformed.")
        users.append(User(username=entry["username"], password=entry["password"]))
    return users


async def load_users(path: str) -> List[User]:
    """Load the {username, password} list once at startup."""
    users = await asyncio.to_thread(_read_users, path)
    _logger.info(f"Loaded {len(users)} users from {path}.")
    return users


def authenticate(users: List[User], username: str, password: str) -> Optional[User]:
    """Return the User if both fields match an entry; otherwise None.

    Plaintext comparison, good for a demo gate only.
    """
    for user in users:
        if user.username == username and user.password == password:
            return user
    return None
