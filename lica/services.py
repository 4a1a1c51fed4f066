"""Repository interfaces and the application services built on them."""

from __future__ import annotations

import uuid
from typing import Protocol

from lica.domain import (
    Category,
    CategoryName,
    Email,
    ListName,
    Product,
    ProductName,
    ShoppingList,
    User,
    create_category,
    create_list,
    create_product,
    create_user,
    new_category_name,
    new_email,
    new_list_name,
    new_product_name,
)


class UserRepository(Protocol):
    """Storage for users."""

    def create(self, user: User) -> None:
        """Persist a new user."""

    def update_email(self, user_id: uuid.UUID, email: Email) -> None:
        """Change the e-mail address of an existing user."""

    def get_by_email(self, email: Email) -> User:
        """Return the user with this e-mail, or an empty user when there is none."""


class ListRepository(Protocol):
    """Storage for shopping lists."""

    def get(self, user: User, name: ListName) -> ShoppingList:
        """Return the user's list with this name."""

    def get_all(self, user: User) -> list[ShoppingList]:
        """Return every list of the user."""

    def create(self, shopping_list: ShoppingList) -> None:
        """Persist a new list."""

    def update(self, shopping_list: ShoppingList) -> None:
        """Store changes to an existing list."""


class CategoryRepository(Protocol):
    """Storage for categories."""

    def get_all(self, user: User) -> list[Category]:
        """Return the user's categories and the shared ones."""

    def get(self, user: User, name: CategoryName) -> Category:
        """Return the category with this name visible to the user."""

    def get_by_id(self, user: User, category_id: uuid.UUID) -> Category:
        """Return the category with this id visible to the user."""

    def create(self, category: Category) -> None:
        """Persist a new category."""

    def update(self, category: Category) -> None:
        """Store changes to an existing category."""


class ProductRepository(Protocol):
    """Storage for products."""

    def get_all(self, user: User) -> list[Product]:
        """Return the user's products and the shared ones."""

    def get(self, user: User, name: ProductName) -> Product:
        """Return the product with this name, or an empty product when there is none."""

    def get_by_id(self, user: User, product_id: uuid.UUID) -> Product:
        """Return the product with this id visible to the user."""

    def create(self, product: Product) -> None:
        """Persist a new product."""

    def update(self, product: Product) -> None:
        """Store changes to an existing product."""


class UserService:
    """User operations; the only service that works without a signed-in user."""

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def create(self, email: str) -> User:
        """Create a user with this e-mail and return it as stored."""
        domain_email = new_email(email)
        self._repository.create(create_user(domain_email))
        return self._repository.get_by_email(domain_email)

    def get(self, email: str) -> User:
        """Return the user with this e-mail; an empty user when none exists."""
        return self._repository.get_by_email(new_email(email))


class ListService:
    """Shopping list operations for a signed-in user."""

    def __init__(self, repository: ListRepository) -> None:
        self._repository = repository

    def create(self, user: User, name: str) -> ShoppingList:
        """Create an empty list with this name for the user."""
        shopping_list = create_list(new_list_name(name), user)
        self._repository.create(shopping_list)
        return shopping_list

    def get(self, user: User, name: str) -> ShoppingList:
        """Return the user's list with this name."""
        return self._repository.get(user, new_list_name(name))

    def get_all_for_user(self, user: User) -> list[ShoppingList]:
        """Return every list of the user."""
        return list(self._repository.get_all(user))


class CategoryService:
    """Category operations for a signed-in user."""

    def __init__(self, repository: CategoryRepository) -> None:
        self._repository = repository

    def create(self, user: User, name: str) -> Category:
        """Create a category for the user and return it as stored."""
        self._repository.create(create_category(new_category_name(name), user))
        return self.get(user, name)

    def get(self, user: User, name: str) -> Category:
        """Return the category with this name visible to the user."""
        return self._repository.get(user, new_category_name(name))

    def get_by_id(self, user: User, category_id: uuid.UUID) -> Category:
        """Return the category with this id visible to the user."""
        return self._repository.get_by_id(user, category_id)

    def get_all(self, user: User) -> list[Category]:
        """Return every category visible to the user."""
        return list(self._repository.get_all(user))


class ProductService:
    """Product operations for a signed-in user."""

    def __init__(self, repository: ProductRepository) -> None:
        self._repository = repository

    def create(self, user: User, name: str) -> Product:
        """Create a product without categories and return it as stored."""
        self._repository.create(create_product(new_product_name(name), [], user))
        return self.get(user, name)

    def get(self, user: User, name: str) -> Product:
        """Return the product with this name; an empty product when none exists."""
        return self._repository.get(user, new_product_name(name))

    def get_by_id(self, user: User, product_id: uuid.UUID) -> Product:
        """Return the product with this id visible to the user."""
        return self._repository.get_by_id(user, product_id)

    def get_all_for_user(self, user: User) -> list[Product]:
        """Return every product visible to the user."""
        return list(self._repository.get_all(user))