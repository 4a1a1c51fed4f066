"""Category storage backed by a relational database."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from lica.domain import NIL_UUID, Category, CategoryName, User
from lica.errors import NotFoundError
from lica.mappers import db_category_to_domain, map_all
from lica.schema import CategoryRecord, UserRecord

log = logging.getLogger(__name__)


class CategoryNotFoundError(NotFoundError):
    """No category matched the request."""

    default_message = "category does not exist"


def _owner_id(category: Category) -> uuid.UUID | None:
    return None if category.user.id == NIL_UUID else category.user.id


def _visible_to(user: User):
    return or_(UserRecord.email.like(str(user.email)), CategoryRecord.user_id.is_(None))


def _select_visible(user: User):
    return select(CategoryRecord).outerjoin(CategoryRecord.user).where(_visible_to(user))


class SqlCategoryRepository:
    """Stores categories; rows without an owner are shared by every user."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_by_id(self, user: User, category_id: uuid.UUID) -> Category:
        """Return the category with this id owned by the user or shared."""
        with Session(self._engine) as session:
            record = session.scalars(
                _select_visible(user).where(CategoryRecord.id == category_id).limit(1)
            ).first()
            if record is None:
                raise CategoryNotFoundError(f"category with id {category_id} does not exist")
            return db_category_to_domain(record)

    def get(self, user: User, name: CategoryName) -> Category:
        """Return the category with this name owned by the user or shared."""
        with Session(self._engine) as session:
            record = session.scalars(
                _select_visible(user).where(CategoryRecord.name == str(name)).limit(1)
            ).first()
            if record is None:
                raise CategoryNotFoundError(f"category with name {name!r} does not exist")
            return db_category_to_domain(record)

    def get_all(self, user: User) -> list[Category]:
        """Return every category owned by the user or shared, ordered by name."""
        with Session(self._engine) as session:
            records = session.scalars(_select_visible(user).order_by(CategoryRecord.name)).all()
            log.debug("Found categories: %s", [record.name for record in records])
            return map_all(records, db_category_to_domain)

    def create(self, category: Category) -> None:
        """Insert a new category; one without an owner is shared."""
        with Session(self._engine) as session, session.begin():
            session.add(
                CategoryRecord(
                    id=category.id,
                    name=str(category.name),
                    user_id=_owner_id(category),
                )
            )

    def update(self, category: Category) -> None:
        """Store a category whose name already exists for its owner."""
        self.get(category.user, category.name)
        with Session(self._engine) as session, session.begin():
            result = session.execute(
                update(CategoryRecord)
                .where(CategoryRecord.id == category.id)
                .values(name=str(category.name), user_id=_owner_id(category))
            )
            if result.rowcount == 0:
                raise CategoryNotFoundError(f"category with id {category.id} does not exist")