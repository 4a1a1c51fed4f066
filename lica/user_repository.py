"""User storage backed by a relational database."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from lica.domain import Email, User
from lica.errors import NotFoundError
from lica.mappers import db_user_to_domain
from lica.schema import UserRecord

log = logging.getLogger(__name__)


class SqlUserRepository:
    """Stores users in the users table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, user: User) -> None:
        """Insert a new user."""
        log.debug("creating user with email: %s", user.email)
        with Session(self._engine) as session, session.begin():
            session.add(UserRecord(id=user.id, email=str(user.email)))

    def get_by_email(self, email: Email) -> User:
        """Return the user with this e-mail, or an empty user when none exists."""
        log.debug("getting user with email: %s", email)
        with Session(self._engine) as session:
            record = session.scalars(
                select(UserRecord).where(UserRecord.email.like(str(email))).limit(1)
            ).first()
            if record is None:
                log.debug("user with email: %s not found, returning empty user", email)
                return User()
            return db_user_to_domain(record)

    def update_email(self, user_id: uuid.UUID, email: Email) -> None:
        """Change the e-mail address of an existing user."""
        with Session(self._engine) as session, session.begin():
            result = session.execute(
                update(UserRecord).where(UserRecord.id == user_id).values(email=str(email))
            )
            if result.rowcount == 0:
                raise NotFoundError(f"user does not exist: {user_id}")