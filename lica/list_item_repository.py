"""List item storage backed by a relational database."""

from __future__ import annotations

import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from lica.domain import ListItem, ListName, User
from lica.errors import NotFoundError
from lica.mappers import db_list_item_to_domain, map_all
from lica.schema import ListItemRecord, ListRecord, UserRecord


class ListItemNotFoundError(NotFoundError):
    """No list item matched the request."""

    default_message = "list item does not exist"


def _select_owned(user: User):
    return (
        select(ListItemRecord)
        .join(ListItemRecord.shopping_list)
        .join(ListRecord.user)
        .where(UserRecord.email == str(user.email))
    )


class SqlListItemRepository:
    """Stores list items; an item belongs to the owner of its list."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_all(self, user: User, list_name: ListName) -> list[ListItem]:
        """Return the items on the user's list with this name."""
        with Session(self._engine) as session:
            records = session.scalars(
                _select_owned(user).where(ListRecord.name == str(list_name))
            ).all()
            return map_all(records, db_list_item_to_domain)

    def get_by_id(self, user: User, item_id: uuid.UUID) -> ListItem:
        """Return the user's item with this id."""
        with Session(self._engine) as session:
            record = session.scalars(
                _select_owned(user).where(ListItemRecord.id == item_id).limit(1)
            ).first()
            if record is None:
                raise ListItemNotFoundError(
                    f"item with id {item_id} does not exist for user {user.email}"
                )
            return db_list_item_to_domain(record)

    def create(self, user: User, item: ListItem) -> ListItem:
        """Insert a new item and return it as stored."""
        with Session(self._engine) as session, session.begin():
            session.add(
                ListItemRecord(
                    id=item.id,
                    list_id=item.shopping_list.id,
                    product_id=item.product.id,
                    category_id=item.category.id,
                    unit=str(item.unit),
                    amount=float(item.amount),
                )
            )
        return self.get_by_id(user, item.id)

    def update(self, user: User, item: ListItem) -> ListItem:
        """Store a new amount, unit and category for the user's item."""
        self.get_by_id(user, item.id)
        with Session(self._engine) as session, session.begin():
            session.execute(
                update(ListItemRecord)
                .where(ListItemRecord.id == item.id)
                .values(
                    amount=float(item.amount),
                    unit=str(item.unit),
                    category_id=item.category.id,
                )
            )
        return self.get_by_id(user, item.id)

    def remove(self, user: User, item_id: uuid.UUID) -> None:
        """Delete the user's item with this id."""
        self.get_by_id(user, item_id)
        with Session(self._engine) as session, session.begin():
            session.execute(delete(ListItemRecord).where(ListItemRecord.id == item_id))