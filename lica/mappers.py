"""Conversion of database records into domain objects."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from lica.domain import (
    NIL_UUID,
    Category,
    ListItem,
    Product,
    ShoppingList,
    User,
    new_amount,
    new_category_name,
    new_email,
    new_list_name,
    new_product_name,
    new_unit,
)
from lica.errors import LicaError
from lica.schema import (
    CategoryRecord,
    ListItemRecord,
    ListRecord,
    ProductRecord,
    UserRecord,
)

R = TypeVar("R")
D = TypeVar("D")


class MappingError(LicaError):
    """A database record could not be turned into a domain object."""

    default_message = "mapping error"


def db_user_to_domain(record: UserRecord | None) -> User:
    """Map a user row; the e-mail must be valid."""
    if record is None:
        raise MappingError("Failed to map user: no user record")
    try:
        email = new_email(record.email or "")
    except LicaError as exc:
        raise MappingError(f"Failed to create email: {record.email!r}") from exc
    return User(id=record.id, email=email)


def _optional_user(record: UserRecord | None) -> User:
    # Shared rows have no owner; an unmappable owner counts as none.
    try:
        return db_user_to_domain(record)
    except MappingError:
        return User()


def db_category_to_domain(record: CategoryRecord | None) -> Category:
    """Map a category row; a missing owner gives an empty user."""
    if record is None:
        raise MappingError("Failed to map category: no category record")
    try:
        name = new_category_name(record.name or "")
    except LicaError as exc:
        raise MappingError(f"Failed to create category name: {record.name!r}") from exc
    return Category(id=record.id, name=name, user=_optional_user(record.user))


def db_product_to_domain(record: ProductRecord | None) -> Product:
    """Map a product row with its categories; it is custom when it has an owner."""
    if record is None:
        raise MappingError("Failed to map product: no product record")
    user = _optional_user(record.user)

    categories = []
    for link in record.categories:
        try:
            categories.append(db_category_to_domain(link.category))
        except MappingError as exc:
            raise MappingError(f"Failed to map category: {link.category!r}") from exc

    try:
        name = new_product_name(record.name or "")
    except LicaError as exc:
        raise MappingError(f"Failed to create product name: {record.name!r}") from exc

    return Product(
        id=record.id,
        name=name,
        categories=categories,
        is_custom=user.id != NIL_UUID,
        user=user,
    )


def _list(record: ListRecord, with_items: bool) -> ShoppingList:
    try:
        user = db_user_to_domain(record.user)
    except MappingError as exc:
        raise MappingError("Failed to map user of list") from exc

    try:
        name = new_list_name(record.name or "")
    except LicaError as exc:
        raise MappingError(f"Failed to create list name: {record.name!r}") from exc

    items = []
    if with_items:
        for item_record in record.list_items:
            try:
                items.append(db_list_item_to_domain(item_record))
            except MappingError as exc:
                raise MappingError(f"Failed to map list item: {item_record.id}") from exc

    return ShoppingList(id=record.id, name=name, items=items, category_ordering={}, user=user)


def db_list_to_domain(record: ListRecord | None) -> ShoppingList:
    """Map a list row with its items; the owner must be valid."""
    if record is None:
        raise MappingError("Failed to map list: no list record")
    return _list(record, with_items=True)


def db_list_item_to_domain(record: ListItemRecord | None) -> ListItem:
    """Map a list item row; its list is mapped without the list's items."""
    if record is None:
        raise MappingError("Failed to map list item: no list item record")

    try:
        product = db_product_to_domain(record.product)
    except MappingError as exc:
        raise MappingError(f"Failed to map product: {record.product!r}") from exc

    raw_amount = record.amount if record.amount is not None else 0.0
    try:
        amount = new_amount(raw_amount)
    except LicaError as exc:
        raise MappingError(f"Failed to create amount: {raw_amount}") from exc

    unit = new_unit(record.unit or "")

    try:
        category = db_category_to_domain(record.category)
    except MappingError as exc:
        raise MappingError(f"Failed to map category: {record.category!r}") from exc

    shopping_list = ShoppingList()
    list_record = record.shopping_list
    if list_record is not None and list_record.id not in (None, NIL_UUID):
        try:
            shopping_list = _list(list_record, with_items=False)
        except MappingError as exc:
            raise MappingError(f"Failed to map list: {list_record.id}") from exc

    return ListItem(
        id=record.id,
        shopping_list=shopping_list,
        product=product,
        amount=amount,
        unit=unit,
        category=category,
    )


def map_all(records: Iterable[R], mapper: Callable[[R], D]) -> list[D]:
    """Map every record, failing on the first one that cannot be mapped."""
    mapped = []
    for record in records:
        try:
            mapped.append(mapper(record))
        except LicaError as exc:
            raise MappingError(f"Failed to map item: {record!r}") from exc
    return mapped