"""Shopping list storage backed by a relational database."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from lica.domain import ListName, ShoppingList, User
from lica.errors import NotFoundError
from lica.mappers import db_list_to_domain, map_all
from lica.schema import ListRecord, UserRecord


class ListNotFoundError(NotFoundError):
    """No shopping list matched the request."""

    default_message = "list does not exist"


def _select_owned(user: User):
    return (
        select(ListRecord)
        .join(ListRecord.user)
        .where(UserRecord.email.like(str(user.email)))
    )


class SqlListRepository:
    """Stores shopping lists in the lists table; every list has an owner."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get(self, user: User, name: ListName) -> ShoppingList:
        """Return the user's list with this name, together with its items."""
        with Session(self._engine) as session:
            record = session.scalars(
                _select_owned(user).where(ListRecord.name == str(name)).limit(1)
            ).first()
            if record is None:
                raise ListNotFoundError(
                    f"list with name {name!r} does not exist for user {user.email}"
                )
            return db_list_to_domain(record)

    def get_all(self, user: User) -> list[ShoppingList]:
        """Return every list of the user, ordered by name."""
        with Session(self._engine) as session:
            records = session.scalars(_select_owned(user).order_by(ListRecord.name)).all()
            return map_all(records, db_list_to_domain)

    def create(self, shopping_list: ShoppingList) -> None:
        """Insert a new, empty list."""
        with Session(self._engine) as session, session.begin():
            session.add(
                ListRecord(
                    id=shopping_list.id,
                    name=str(shopping_list.name),
                    user_id=shopping_list.user.id,
                )
            )

    def update(self, shopping_list: ShoppingList) -> None:
        """Store a list whose name already exists for its owner."""
        self.get(shopping_list.user, shopping_list.name)
        with Session(self._engine) as session, session.begin():
            result = session.execute(
                update(ListRecord)
                .where(ListRecord.id == shopping_list.id)
                .values(name=str(shopping_list.name), user_id=shopping_list.user.id)
            )
            if result.rowcount == 0:
                raise ListNotFoundError(f"list with id {shopping_list.id} does not exist")