"""
User Service

CRUD operations for the User resource and named sequence counters,
expressed as filter/update calls on a DatabaseContext.

Expected outcomes are return values: a missing user is ``None``, an update
or delete that touched nothing is ``False``. Only a duplicate id on insert
and validation failures raise domain errors; store errors propagate as-is.
"""

import logging
import time
from typing import Any

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..config import UsersDatabaseSettings
from ..constants import SEQUENCE_FIELD
from ..database.base import CollectionHandle, DatabaseContext
from ..exceptions import ConfigurationError, DuplicateUserError
from ..models import Counter, User, to_object_id_filter
from ..observability import log_operation
from ..validation import ensure_valid

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for User CRUD and sequence generation.

    Example:
        service = UserService(MongoDbContext(db), settings)

        user = await service.create_user(
            User(name="John Doe", username="johndoe", email="johndoe@example.com")
        )
        same = await service.get_user(user.id)
        await service.delete_user(user.id)
    """

    def __init__(self, context: DatabaseContext, settings: UsersDatabaseSettings):
        """
        Initialize the service.

        Args:
            context: DatabaseContext used for every operation
            settings: Settings providing the users and counters collection names

        Raises:
            ConfigurationError: If the context or a collection name is missing
        """
        if context is None:
            raise ConfigurationError("A database context is required", config_key="context")
        if settings is None:
            raise ConfigurationError("Database settings are required", config_key="settings")
        if not settings.users_collection_name:
            raise ConfigurationError(
                "Users collection name is required", config_key="USERS_COLLECTION_NAME"
            )
        if not settings.counters_collection_name:
            raise ConfigurationError(
                "Counters collection name is required", config_key="COUNTERS_COLLECTION_NAME"
            )

        self._context = context
        self._users_collection_name = settings.users_collection_name
        self._counters_collection_name = settings.counters_collection_name

    @property
    def _users(self) -> CollectionHandle:
        return self._context.get_collection(self._users_collection_name)

    @property
    def _counters(self) -> CollectionHandle:
        return self._context.get_collection(self._counters_collection_name)

    def _log(self, operation: str, started: float, **context: Any) -> None:
        log_operation(
            logger,
            operation,
            level=logging.DEBUG,
            duration_ms=(time.perf_counter() - started) * 1000,
            **context,
        )

    async def increment_sequence(self, name: str) -> Counter:
        """
        Increment a named sequence by 1 and return the new value.

        The counter is created on first use, so a new name yields seq == 1.
        The increment is a single atomic find-and-update, so concurrent
        callers never receive the same value.

        Args:
            name: Sequence name (e.g. "userId")

        Returns:
            Counter holding the value after the increment
        """
        started = time.perf_counter()
        doc = await self._counters.find_one_and_update(
            {"_id": name},
            {"$inc": {SEQUENCE_FIELD: 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        counter = Counter.from_document(doc)
        self._log("increment_sequence", started, sequence=name, seq=counter.seq)
        return counter

    async def get_user(self, id: str) -> User | None:
        """
        Get a user by id.

        The id is not format-checked here; an id that cannot match anything
        simply yields None.
        """
        docs = await self._users.find(to_object_id_filter(id)).to_list(length=1)
        if not docs:
            return None
        return User.from_document(docs[0])

    async def list_users(self) -> list[User]:
        """Return every user in the store's natural order."""
        docs = await self._users.find({}).to_list(length=None)
        return [User.from_document(doc) for doc in docs]

    async def create_user(self, user: User) -> User:
        """
        Insert a new user.

        Args:
            user: User to insert; the store assigns an id when it has none

        Returns:
            The same User, now carrying its id

        Raises:
            UserValidationError: If the user breaks a field rule
            DuplicateUserError: If the id is already in use
        """
        ensure_valid(user)
        started = time.perf_counter()
        doc = user.to_document()
        try:
            result = await self._users.insert_one(doc)
        except DuplicateKeyError as e:
            logger.info(f"Rejected duplicate user id {user.id}")
            raise DuplicateUserError("A user with this id already exists", user_id=user.id) from e

        user.id = str(result.inserted_id)
        self._log("create_user", started, user_id=user.id)
        return user

    async def update_user(self, id: str, user: User) -> bool:
        """
        Replace the whole document of user ``id``.

        The caller is responsible for ``user.id`` matching ``id``.

        Returns:
            True if the stored document changed. False both when no user has
            this id and when the replacement equals what is stored.

        Raises:
            UserValidationError: If the user breaks a field rule
        """
        ensure_valid(user)
        started = time.perf_counter()
        result = await self._users.replace_one(to_object_id_filter(id), user.to_document())
        updated = result.modified_count > 0
        self._log("update_user", started, user_id=id, updated=updated)
        return updated

    async def delete_user(self, id: str) -> bool:
        """Delete user ``id``; True if a document was removed."""
        started = time.perf_counter()
        result = await self._users.delete_one(to_object_id_filter(id))
        deleted = result.deleted_count > 0
        self._log("delete_user", started, user_id=id, deleted=deleted)
        return deleted
