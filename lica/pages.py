"""HTML pages, form actions and htmx components."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from werkzeug.wrappers import Request, Response

from lica.domain import User
from lica.errors import LicaError, ValidationError
from lica.list_items import ListItemCreate
from lica.responses import handle_error, is_htmx_request
from lica.views import Templates

log = logging.getLogger(__name__)


def _html(body: str) -> Response:
    return Response(body, mimetype="text/html")


def _not_found() -> Response:
    return Response(status=404)


@dataclass
class IndexPage:
    templates: Templates

    def index(self, request: Request, user: User) -> Response:
        """The start page."""
        return _html(self.templates.render("index", user))


@dataclass
class ListPage:
    list_service: Any
    templates: Templates

    def lists(self, request: Request, user: User) -> Response:
        """All lists of the user."""
        if not is_htmx_request(request):
            return _not_found()
        try:
            lists = self.list_service.get_all_for_user(user)
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to get lists for user: %s", exc)
            return handle_error(exc)
        try:
            return _html(self.templates.render("lists", {"lists": lists, "user": user}))
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to render lists: %s", exc)
            return Response("")

    def list(self, request: Request, user: User, name: str) -> Response:
        """One list of the user."""
        if not is_htmx_request(request):
            return _not_found()
        try:
            shopping_list = self.list_service.get(user, name)
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to get list %r for user: %s", name, exc)
            return handle_error(exc)
        try:
            return _html(self.templates.render("list", {"list": shopping_list, "user": user}))
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to render list page: %s", exc)
            return handle_error(exc)


@dataclass
class ListAction:
    list_service: Any
    list_page: ListPage

    def create(self, request: Request, user: User) -> Response:
        """Create a list from the form and show it."""
        if not is_htmx_request(request):
            return _not_found()
        name = request.form.get("name", "")
        try:
            created = self.list_service.create(user, name)
        except Exception as exc:  # noqa: BLE001
            log.error("failed to create list: %s", exc)
            return handle_error(exc)
        log.debug("Created new list for user: %s", created.name)
        return self.list_page.list(request, user, name)


@dataclass
class ListItemAction:
    list_item_service: Any
    list_page: ListPage

    def add(self, request: Request, user: User) -> Response:
        """Put a product on a list from the form and show the list."""
        if not is_htmx_request(request):
            return _not_found()

        problems = []
        product = request.form.get("product", "")
        if not product:
            problems.append("product must not be empty")
        category = request.form.get("category", "")
        if not category:
            problems.append("category must not be empty")
        raw_amount = request.form.get("amount", "")
        amount = 0.0
        try:
            amount = float(raw_amount)
        except ValueError:
            problems.append(f"invalid amount: {raw_amount!r}")

        if problems:
            log.error("Failed to validate input: %s", problems)
            return handle_error(ValidationError("; ".join(problems)))

        list_name = request.form.get("listName", "")
        item = ListItemCreate(
            list_name=list_name, product_name=product, category_name=category, amount=amount
        )
        try:
            created = self.list_item_service.add(user, item)
        except Exception as exc:  # noqa: BLE001
            log.error("failed to add item to list: %s", exc)
            return handle_error(exc)
        log.debug("Added item to list: %s", created.id)
        return self.list_page.list(request, user, list_name)


@dataclass
class ListComponent:
    templates: Templates

    def new(self, request: Request, user: User) -> Response:
        """Form for a new list."""
        if not is_htmx_request(request):
            return _not_found()
        return _html(self.templates.render("list-new", None))


@dataclass
class ListItemComponent:
    category_service: Any
    templates: Templates

    def new(self, request: Request, user: User) -> Response:
        """Form for a new item on the list named in the 'list' query parameter."""
        if not is_htmx_request(request):
            return _not_found()
        list_name = request.args.get("list", "")
        if not list_name:
            return handle_error(LicaError("no list provided"))
        try:
            categories = self.category_service.get_all(user)
        except Exception as exc:  # noqa: BLE001
            log.error("Failed to get categories: %s", exc)
            return handle_error(exc)
        return _html(
            self.templates.render(
                "list-item-new", {"list_name": list_name, "categories": categories}
            )
        )