"""User registration and lookup.

Credentials are opaque here: the password hash is produced and checked by the
authentication layer.
"""

import threading

from loguru import logger

from ticketing.domain import Role, User, UserId
from ticketing.domain.errors import EmailTakenError, InvalidInputError, UserNotFoundError
from ticketing.services.clock import IdGenerator, UuidGenerator
from ticketing.services.validation import coerce_user_id, require_text
from ticketing.stores.interfaces import Stores


class AccountService:
    """Service for user accounts."""

    def __init__(self, stores: Stores, ids: IdGenerator | None = None) -> None:
        self._stores = stores
        self._ids = ids or UuidGenerator()
        self._register_lock = threading.Lock()

    def register(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role = Role.CUSTOMER,
    ) -> User:
        """Create a user with a unique email.

        Raises:
            InvalidInputError: If name, email or password hash is blank.
            EmailTakenError: If the email is already registered.
        """
        name = require_text(name, "Name")
        email = require_text(email, "Email").lower()
        if "@" not in email:
            raise InvalidInputError("Email is invalid")
        password_hash = require_text(password_hash, "Password hash")

        with self._register_lock:
            if self._stores.users.find(lambda u: u.email.lower() == email) is not None:
                raise EmailTakenError()
            user = User(
                id=UserId(self._ids.new_id()),
                name=name,
                email=email,
                password_hash=password_hash,
                role=role,
            )
            self._stores.users.insert(user)

        logger.bind(user_id=str(user.id)).info("User registered: {}", user.role.value)
        return user

    def get_user(self, user_id: UserId | str) -> User:
        """Return a user by ID.

        Raises:
            InvalidInputError: If the user_id is not a valid UUID.
            UserNotFoundError: If the user does not exist.
        """
        user_id = coerce_user_id(user_id)
        user = self._stores.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
