"""
Business logic for users.

``UserService`` registers users by unique username and looks them up
in the document store handle it is constructed with.
"""

import logging
from typing import List

from ..core.db import DocumentStore
from ..core.errors import NotFoundError
from ..schemas.user import UserCreate, UserRead


class UserService:
    """Register, list and look up users."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def register(self, data: UserCreate) -> UserRead:
        """Return the user with ``data.username``, creating it if needed.

        Registering an existing username is not an error: the stored
        user is returned unchanged and nothing is written.  Two
        concurrent registrations of the same new name may both miss the
        lookup; the store's unique constraint then rejects the second
        insert with a ``PersistenceError``.
        """
        logger = logging.getLogger(__name__)
        existing = self.store.users.find_one({"username": data.username})
        if existing:
            logger.debug("User %s already registered as %s", data.username, existing["id"])
            return UserRead(username=existing["username"], id=existing["id"])
        user = self.store.users.create({"username": data.username})
        logger.info("Registered user %s as %s", user["username"], user["id"])
        return UserRead(username=user["username"], id=user["id"])

    async def list_users(self) -> List[UserRead]:
        """Return all users in store order."""
        return [UserRead(username=doc["username"], id=doc["id"]) for doc in self.store.users.find()]

    async def get_user(self, user_id: str) -> UserRead:
        """Return a user by identifier or raise ``NotFoundError``."""
        doc = self.store.users.find_by_id(user_id)
        if not doc:
            raise NotFoundError("User not found")
        return UserRead(username=doc["username"], id=doc["id"])
