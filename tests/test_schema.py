import uuid

import pytest
from sqlalchemy import create_engine, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lica.schema import (
    CategoryRecord,
    ListItemRecord,
    ListRecord,
    ProductCategoryRecord,
    ProductRecord,
    UserRecord,
    create_tables,
)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


def test_create_tables_creates_all_tables(engine):
    names = set(inspect(engine).get_table_names())
    assert names == {
        "users",
        "categories",
        "products",
        "product_categories",
        "lists",
        "list_items",
    }


def test_products_have_no_is_custom_column(engine):
    columns = {column["name"] for column in inspect(engine).get_columns("products")}
    assert columns == {"id", "name", "user_id"}


def test_create_tables_is_idempotent(engine):
    create_tables(engine)
    assert "list_items" in inspect(engine).get_table_names()


def test_relationships_round_trip(engine):
    user_id, category_id, product_id = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    list_id, item_id = uuid.uuid4(), uuid.uuid4()
    with Session(engine) as session:
        session.add(UserRecord(id=user_id, email="shopper@example.com"))
        session.add(CategoryRecord(id=category_id, name="dairy", user_id=user_id))
        session.add(ProductRecord(id=product_id, name="milk", user_id=user_id))
        session.add(
            ProductCategoryRecord(
                product_id=product_id, user_id=user_id, category_id=category_id
            )
        )
        session.add(ListRecord(id=list_id, name="groceries", user_id=user_id))
        session.add(
            ListItemRecord(
                id=item_id,
                unit="stk",
                amount=2.5,
                list_id=list_id,
                product_id=product_id,
                category_id=category_id,
            )
        )
        session.commit()

    with Session(engine) as session:
        shopping_list = session.scalars(select(ListRecord)).one()
        assert shopping_list.user.email == "shopper@example.com"
        [item] = shopping_list.list_items
        assert item.id == item_id
        assert item.amount == 2.5
        assert item.product.name == "milk"
        assert item.category.name == "dairy"
        assert [link.category.name for link in item.product.categories] == ["dairy"]
        category = session.get(CategoryRecord, category_id)
        assert [link.product.name for link in category.products] == ["milk"]


def test_list_item_amount_defaults_to_one(engine):
    user_id, category_id, product_id, list_id = (uuid.uuid4() for _ in range(4))
    with Session(engine) as session:
        session.add(UserRecord(id=user_id, email="shopper@example.com"))
        session.add(CategoryRecord(id=category_id, name="dairy", user_id=None))
        session.add(ProductRecord(id=product_id, name="milk", user_id=None))
        session.add(ListRecord(id=list_id, name="groceries", user_id=user_id))
        item = ListItemRecord(
            id=uuid.uuid4(), list_id=list_id, product_id=product_id, category_id=category_id
        )
        session.add(item)
        session.commit()
        assert item.amount == 1.0
        assert item.unit is None


def test_email_must_be_unique(engine):
    with Session(engine) as session:
        session.add(UserRecord(id=uuid.uuid4(), email="shopper@example.com"))
        session.add(UserRecord(id=uuid.uuid4(), email="shopper@example.com"))
        with pytest.raises(IntegrityError):
            session.commit()


def test_list_name_unique_per_user(engine):
    first_user, second_user = uuid.uuid4(), uuid.uuid4()
    with Session(engine) as session:
        session.add(UserRecord(id=first_user, email="one@example.com"))
        session.add(UserRecord(id=second_user, email="two@example.com"))
        session.add(ListRecord(id=uuid.uuid4(), name="groceries", user_id=first_user))
        session.add(ListRecord(id=uuid.uuid4(), name="groceries", user_id=second_user))
        session.commit()
        assert len(session.scalars(select(ListRecord)).all()) == 2

        session.add(ListRecord(id=uuid.uuid4(), name="groceries", user_id=first_user))
        with pytest.raises(IntegrityError):
            session.commit()