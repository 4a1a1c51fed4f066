import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lica.domain import (
    Category,
    CategoryName,
    Email,
    ListItem,
    ListName,
    Product,
    ProductName,
    ShoppingList,
    User,
    create_list_item,
    new_unit,
)
from lica.list_item_repository import ListItemNotFoundError, SqlListItemRepository
from lica.schema import (
    CategoryRecord,
    ListRecord,
    ProductRecord,
    UserRecord,
    create_tables,
)

ALICE = User(id=uuid.uuid4(), email=Email("alice@example.com"))
BOB = User(id=uuid.uuid4(), email=Email("bob@example.com"))
GROCERIES = ShoppingList(id=uuid.uuid4(), name=ListName("groceries"), user=ALICE)
PARTY = ShoppingList(id=uuid.uuid4(), name=ListName("party"), user=ALICE)
MILK = Product(id=uuid.uuid4(), name=ProductName("milk"))
BREAD = Product(id=uuid.uuid4(), name=ProductName("bread"))
DAIRY = Category(id=uuid.uuid4(), name=CategoryName("dairy"))
BAKERY = Category(id=uuid.uuid4(), name=CategoryName("bakery"))


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'lica.db'}")
    create_tables(engine)
    with Session(engine) as session, session.begin():
        session.add_all(
            [
                UserRecord(id=ALICE.id, email=str(ALICE.email)),
                UserRecord(id=BOB.id, email=str(BOB.email)),
                ListRecord(id=GROCERIES.id, name=str(GROCERIES.name), user_id=ALICE.id),
                ListRecord(id=PARTY.id, name=str(PARTY.name), user_id=ALICE.id),
                ProductRecord(id=MILK.id, name=str(MILK.name)),
                ProductRecord(id=BREAD.id, name=str(BREAD.name)),
                CategoryRecord(id=DAIRY.id, name=str(DAIRY.name)),
                CategoryRecord(id=BAKERY.id, name=str(BAKERY.name)),
            ]
        )
    yield engine
    engine.dispose()


@pytest.fixture
def repo(engine):
    return SqlListItemRepository(engine)


def _item(shopping_list=GROCERIES, product=MILK, amount=2.0, category=DAIRY):
    return create_list_item(shopping_list, product, amount, new_unit("stk"), category)


def test_create_returns_stored_item(repo):
    item = _item()

    created = repo.create(ALICE, item)

    assert created.id == item.id
    assert created.shopping_list.id == GROCERIES.id
    assert created.shopping_list.name == "groceries"
    assert created.shopping_list.user == ALICE
    assert created.product.name == "milk"
    assert created.category.name == "dairy"
    assert created.amount == 2.0
    assert created.unit == "stk"


def test_create_duplicate_is_rejected(repo):
    repo.create(ALICE, _item())
    with pytest.raises(IntegrityError):
        repo.create(ALICE, _item())


def test_get_by_id_of_other_user_raises(repo):
    created = repo.create(ALICE, _item())
    with pytest.raises(ListItemNotFoundError):
        repo.get_by_id(BOB, created.id)


def test_get_by_id_missing_raises(repo):
    with pytest.raises(ListItemNotFoundError):
        repo.get_by_id(ALICE, uuid.uuid4())


def test_get_all_is_limited_to_named_list(repo):
    first = repo.create(ALICE, _item())
    second = repo.create(ALICE, _item(product=BREAD, category=BAKERY))
    repo.create(ALICE, _item(shopping_list=PARTY))

    items = repo.get_all(ALICE, ListName("groceries"))

    assert {item.id for item in items} == {first.id, second.id}
    assert all(item.shopping_list.id == GROCERIES.id for item in items)


def test_get_all_for_other_user_is_empty(repo):
    repo.create(ALICE, _item())
    assert repo.get_all(BOB, ListName("groceries")) == []


def test_update_changes_amount_and_category(repo):
    created = repo.create(ALICE, _item())
    changed = ListItem(
        id=created.id,
        shopping_list=created.shopping_list,
        product=created.product,
        amount=5.0,
        unit=created.unit,
        category=BAKERY,
    )

    updated = repo.update(ALICE, changed)

    assert updated.amount == 5.0
    assert updated.category.id == BAKERY.id
    assert updated.product.id == MILK.id
    assert repo.get_by_id(ALICE, created.id).amount == 5.0


def test_update_missing_raises(repo):
    with pytest.raises(ListItemNotFoundError):
        repo.update(ALICE, _item())


def test_remove_deletes_item(repo):
    created = repo.create(ALICE, _item())

    repo.remove(ALICE, created.id)

    with pytest.raises(ListItemNotFoundError):
        repo.get_by_id(ALICE, created.id)
    assert repo.get_all(ALICE, ListName("groceries")) == []


def test_remove_other_users_item_raises_and_keeps_it(repo):
    created = repo.create(ALICE, _item())
    with pytest.raises(ListItemNotFoundError):
        repo.remove(BOB, created.id)
    assert repo.get_by_id(ALICE, created.id).id == created.id