"""User record stored under the ``users`` and ``currentUser`` keys.

Users identify by username only; there is no password and nothing is hashed.
"""

from __future__ import annotations

from pydantic import Field

from app.models.base import StoredRecord


class User(StoredRecord):
    """Application user, one entry of the ``users`` list."""

    username: str = Field(min_length=1, max_length=100)
    email: str = ""
    full_name: str = ""
    location: str = ""

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
