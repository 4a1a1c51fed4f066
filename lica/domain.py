"""Domain model: users, categories, products, shopping lists and their items."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import NewType

from lica.errors import ValidationError

NIL_UUID = uuid.UUID(int=0)

Email = NewType("Email", str)
CategoryName = NewType("CategoryName", str)
ListName = NewType("ListName", str)
ProductName = NewType("ProductName", str)
Unit = NewType("Unit", str)


class InvalidEmailError(ValidationError):
    """An e-mail address is not acceptable."""

    default_message = "invalid email"


class InvalidCategoryNameError(ValidationError):
    """A category name is not acceptable."""

    default_message = "invalid category name"


class InvalidListNameError(ValidationError):
    """A list name is not acceptable."""

    default_message = "invalid list name"


class InvalidProductNameError(ValidationError):
    """A product name is not acceptable."""

    default_message = "invalid product name"


class InvalidAmountError(ValidationError):
    """A list item amount is not acceptable."""

    default_message = "invalid amount"


def new_email(email: str) -> Email:
    """Validate an e-mail address: it must contain an '@'."""
    if "@" not in email:
        raise InvalidEmailError(f"email must contain '@': '{email}'")
    return Email(email)


def new_category_name(name: str) -> CategoryName:
    """Validate a category name: it must not be empty."""
    if not name:
        raise InvalidCategoryNameError("name must not be empty")
    return CategoryName(name)


def new_list_name(name: str) -> ListName:
    """Validate a list name: it must not be empty."""
    if not name:
        raise InvalidListNameError("name must not be empty")
    return ListName(name)


def new_product_name(name: str) -> ProductName:
    """Validate a product name: it must not be empty."""
    if not name:
        raise InvalidProductNameError("name must not be empty")
    return ProductName(name)


def new_amount(amount: float) -> float:
    """Validate an item amount: it must not be negative."""
    if amount < 0:
        raise InvalidAmountError("amount must be positive")
    return float(amount)


def new_unit(unit: str) -> Unit:
    """Any string is a valid unit."""
    return Unit(unit)


@dataclass(frozen=True)
class User:
    id: uuid.UUID = NIL_UUID
    email: Email = Email("")


@dataclass(frozen=True)
class Category:
    id: uuid.UUID = NIL_UUID
    name: CategoryName = CategoryName("")
    user: User = field(default_factory=User)


@dataclass
class Product:
    id: uuid.UUID = NIL_UUID
    name: ProductName = ProductName("")
    categories: list[Category] = field(default_factory=list)
    is_custom: bool = False
    user: User = field(default_factory=User)


@dataclass
class ShoppingList:
    id: uuid.UUID = NIL_UUID
    name: ListName = ListName("")
    items: list[ListItem] = field(default_factory=list)
    category_ordering: dict[int, Category] = field(default_factory=dict)
    user: User = field(default_factory=User)


@dataclass
class ListItem:
    id: uuid.UUID = NIL_UUID
    shopping_list: ShoppingList = field(default_factory=ShoppingList)
    product: Product = field(default_factory=Product)
    amount: float = 0.0
    unit: Unit = Unit("")
    category: Category = field(default_factory=Category)


def create_user(email: Email) -> User:
    """Make a new user with a fresh id."""
    return User(id=uuid.uuid4(), email=email)


def create_category(name: CategoryName, user: User) -> Category:
    """Make a new category with a fresh id."""
    return Category(id=uuid.uuid4(), name=name, user=user)


def create_list(name: ListName, user: User) -> ShoppingList:
    """Make a new, empty shopping list with a fresh id."""
    return ShoppingList(id=uuid.uuid4(), name=name, items=[], category_ordering={}, user=user)


def create_product(name: ProductName, categories: list[Category], user: User) -> Product:
    """Make a new product; it is custom when it belongs to a real user."""
    return Product(
        id=uuid.uuid4(),
        name=name,
        categories=list(categories),
        is_custom=user.id != NIL_UUID,
        user=user,
    )


def create_list_item(
    shopping_list: ShoppingList,
    product: Product,
    amount: float,
    unit: Unit,
    category: Category,
) -> ListItem:
    """Make a new list item with a fresh id."""
    return ListItem(
        id=uuid.uuid4(),
        shopping_list=shopping_list,
        product=product,
        amount=amount,
        unit=unit,
        category=category,
    )