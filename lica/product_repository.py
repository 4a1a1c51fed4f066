"""Product storage backed by a relational database."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from lica.domain import NIL_UUID, Product, ProductName, User
from lica.errors import NotFoundError
from lica.mappers import db_product_to_domain, map_all
from lica.schema import ProductRecord, UserRecord

log = logging.getLogger(__name__)


class ProductNotFoundError(NotFoundError):
    """No product matched the request."""

    default_message = "product does not exist"


def _owner_id(product: Product) -> uuid.UUID | None:
    return None if product.user.id == NIL_UUID else product.user.id


def _select_visible(user: User):
    return (
        select(ProductRecord)
        .outerjoin(ProductRecord.user)
        .where(or_(UserRecord.email.like(str(user.email)), ProductRecord.user_id.is_(None)))
    )


class SqlProductRepository:
    """Stores products; rows without an owner are shared by every user."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_by_id(self, user: User, product_id: uuid.UUID) -> Product:
        """Return the product with this id owned by the user or shared."""
        with Session(self._engine) as session:
            record = session.scalars(
                _select_visible(user).where(ProductRecord.id == product_id).limit(1)
            ).first()
            if record is None:
                raise ProductNotFoundError(
                    f"product with id {product_id} does not exist for user {user.email}"
                )
            return db_product_to_domain(record)

    def get(self, user: User, name: ProductName) -> Product:
        """Return the product with this name, or an empty product when none exists."""
        with Session(self._engine) as session:
            record = session.scalars(
                _select_visible(user).where(ProductRecord.name == str(name)).limit(1)
            ).first()
            if record is None:
                log.debug(
                    "Product with name: %s, not found for user: %s, returning empty product",
                    name,
                    user.email,
                )
                return Product()
            return db_product_to_domain(record)

    def get_all(self, user: User) -> list[Product]:
        """Return every product owned by the user or shared, ordered by name."""
        with Session(self._engine) as session:
            records = session.scalars(_select_visible(user).order_by(ProductRecord.name)).all()
            return map_all(records, db_product_to_domain)

    def create(self, product: Product) -> None:
        """Insert a new product; one without an owner is shared."""
        with Session(self._engine) as session, session.begin():
            session.add(
                ProductRecord(
                    id=product.id,
                    name=str(product.name),
                    user_id=_owner_id(product),
                )
            )

    def update(self, product: Product) -> None:
        """Store a product whose name already exists for its owner."""
        existing = self.get(product.user, product.name)
        if existing.id == NIL_UUID:
            raise ProductNotFoundError(f"product does not exist: {product.name!r}")
        with Session(self._engine) as session, session.begin():
            result = session.execute(
                update(ProductRecord)
                .where(ProductRecord.id == product.id)
                .values(name=str(product.name), user_id=_owner_id(product))
            )
            if result.rowcount == 0:
                raise ProductNotFoundError(f"product with id {product.id} does not exist")