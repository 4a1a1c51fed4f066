"""Relational tables for users, categories, products, lists and list items."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Float, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class _Base(DeclarativeBase):
    pass


class UserRecord(_Base):
    """A row of the users table."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class CategoryRecord(_Base):
    """A row of the categories table; rows without a user are shared."""

    __tablename__ = "categories"
    __table_args__ = (UniqueConstraint("name", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True
    )
    user: Mapped[Optional[UserRecord]] = relationship()
    products: Mapped[list[ProductCategoryRecord]] = relationship(back_populates="category")


class ProductRecord(_Base):
    """A row of the products table; rows without a user are shared."""

    __tablename__ = "products"
    __table_args__ = (UniqueConstraint("name", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=True
    )
    user: Mapped[Optional[UserRecord]] = relationship()
    categories: Mapped[list[ProductCategoryRecord]] = relationship(back_populates="product")


class ProductCategoryRecord(_Base):
    """Link between a product and one of its categories, per user."""

    __tablename__ = "product_categories"

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), primary_key=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), primary_key=True)
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("categories.id"), primary_key=True
    )
    product: Mapped[ProductRecord] = relationship(back_populates="categories")
    category: Mapped[CategoryRecord] = relationship(back_populates="products")
    user: Mapped[UserRecord] = relationship()


class ListRecord(_Base):
    """A row of the lists table."""

    __tablename__ = "lists"
    __table_args__ = (UniqueConstraint("name", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    user: Mapped[UserRecord] = relationship()
    list_items: Mapped[list[ListItemRecord]] = relationship(back_populates="shopping_list")


class ListItemRecord(_Base):
    """A row of the list_items table."""

    __tablename__ = "list_items"
    __table_args__ = (UniqueConstraint("list_id", "product_id", "category_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    unit: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    amount: Mapped[float] = mapped_column(
        Float, nullable=False, default=1.0, server_default="1.0"
    )
    list_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("lists.id"), nullable=False)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("categories.id"), nullable=False
    )
    shopping_list: Mapped[ListRecord] = relationship(back_populates="list_items")
    product: Mapped[ProductRecord] = relationship()
    category: Mapped[CategoryRecord] = relationship()


def create_tables(engine: Engine) -> None:
    """Create every table that does not exist yet."""
    _Base.metadata.create_all(engine)