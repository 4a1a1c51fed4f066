"""List item interfaces and the service that adds, changes and removes items."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Protocol

from lica.domain import (
    NIL_UUID,
    ListItem,
    ListName,
    User,
    create_list_item,
    new_amount,
    new_list_name,
    new_unit,
)
from lica.services import CategoryService, ListService, ProductService

DEFAULT_UNIT = "stk"


@dataclass(frozen=True)
class ListItemCreate:
    """What is needed to put a product on a list."""

    list_name: str
    product_name: str
    category_name: str
    amount: float


@dataclass(frozen=True)
class ListItemUpdate:
    """New category and amount for an existing item."""

    id: uuid.UUID
    category_name: str
    amount: float


class ListItemRepository(Protocol):
    """Storage for list items."""

    def get_all(self, user: User, list_name: ListName) -> list[ListItem]:
        """Return the items of the user's list with this name."""

    def get_by_id(self, user: User, item_id: uuid.UUID) -> ListItem:
        """Return the user's item with this id."""

    def create(self, user: User, item: ListItem) -> ListItem:
        """Persist a new item and return it as stored."""

    def update(self, user: User, item: ListItem) -> ListItem:
        """Store changes to an item and return it as stored."""

    def remove(self, user: User, item_id: uuid.UUID) -> None:
        """Delete the user's item with this id."""


class ListItemService:
    """Operations on the items of a signed-in user's lists."""

    def __init__(
        self,
        repository: ListItemRepository,
        product_service: ProductService,
        category_service: CategoryService,
        list_service: ListService,
    ) -> None:
        self._repository = repository
        self._products = product_service
        self._categories = category_service
        self._lists = list_service

    def get_all(self, user: User, list_name: str) -> list[ListItem]:
        """Return every item on the user's list with this name."""
        return list(self._repository.get_all(user, new_list_name(list_name)))

    def add(self, user: User, create_item: ListItemCreate) -> ListItem:
        """Put a product on a list, creating the product when it is unknown."""
        shopping_list = self._lists.get(user, create_item.list_name)

        product = self._products.get(user, create_item.product_name)
        if product.id == NIL_UUID:
            product = self._products.create(user, create_item.product_name)

        amount = new_amount(create_item.amount)
        unit = new_unit(DEFAULT_UNIT)
        category = self._categories.get(user, create_item.category_name)

        item = create_list_item(shopping_list, product, amount, unit, category)
        return self._repository.create(user, item)

    def remove(self, user: User, item_id: uuid.UUID) -> None:
        """Delete the user's item with this id."""
        self._repository.remove(user, item_id)

    def update(self, user: User, update_item: ListItemUpdate) -> None:
        """Change the amount and category of an existing item."""
        existing = self._repository.get_by_id(user, update_item.id)
        amount = new_amount(update_item.amount)
        category = self._categories.get(user, update_item.category_name)

        item = ListItem(
            id=update_item.id,
            shopping_list=existing.shopping_list,
            product=existing.product,
            amount=amount,
            unit=existing.unit,
            category=category,
        )
        self._repository.update(user, item)