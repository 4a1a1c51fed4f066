import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from lica.domain import (
    NIL_UUID,
    Email,
    Product,
    ProductName,
    User,
    create_product,
)
from lica.product_repository import ProductNotFoundError, SqlProductRepository
from lica.schema import (
    CategoryRecord,
    ProductCategoryRecord,
    UserRecord,
    create_tables,
)

ALICE = User(id=uuid.uuid4(), email=Email("alice@example.com"))
BOB = User(id=uuid.uuid4(), email=Email("bob@example.com"))


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'lica.db'}")
    create_tables(engine)
    with Session(engine) as session, session.begin():
        session.add_all(
            [
                UserRecord(id=ALICE.id, email=str(ALICE.email)),
                UserRecord(id=BOB.id, email=str(BOB.email)),
            ]
        )
    yield engine
    engine.dispose()


@pytest.fixture
def repo(engine):
    return SqlProductRepository(engine)


def test_get_missing_returns_empty_product(repo):
    found = repo.get(ALICE, ProductName("nothing"))
    assert found.id == NIL_UUID
    assert found == Product()


def test_create_custom_product_round_trip(repo):
    product = create_product(ProductName("oat milk"), [], ALICE)
    repo.create(product)

    found = repo.get(ALICE, ProductName("oat milk"))

    assert found.id == product.id
    assert found.name == "oat milk"
    assert found.is_custom is True
    assert found.user == ALICE
    assert found.categories == []


def test_shared_product_is_visible_to_everyone(repo):
    product = create_product(ProductName("bread"), [], User())
    repo.create(product)

    for user in (ALICE, BOB):
        found = repo.get(user, ProductName("bread"))
        assert found.id == product.id
        assert found.is_custom is False
        assert found.user.id == NIL_UUID


def test_other_users_product_is_hidden(repo):
    product = create_product(ProductName("secret sauce"), [], ALICE)
    repo.create(product)

    assert repo.get(BOB, ProductName("secret sauce")).id == NIL_UUID
    with pytest.raises(ProductNotFoundError):
        repo.get_by_id(BOB, product.id)


def test_get_by_id_round_trip(repo):
    product = create_product(ProductName("cheese"), [], ALICE)
    repo.create(product)

    found = repo.get_by_id(ALICE, product.id)

    assert found.id == product.id
    assert found.name == "cheese"


def test_get_by_id_missing_raises(repo):
    with pytest.raises(ProductNotFoundError):
        repo.get_by_id(ALICE, uuid.uuid4())


def test_get_all_includes_shared_and_own_sorted(repo):
    repo.create(create_product(ProductName("tea"), [], ALICE))
    repo.create(create_product(ProductName("apples"), [], User()))
    repo.create(create_product(ProductName("coffee"), [], BOB))

    products = repo.get_all(ALICE)

    names = [product.name for product in products]
    assert names == sorted(names)
    assert set(names) == {"tea", "apples"}


def test_product_categories_are_mapped(engine, repo):
    product = create_product(ProductName("yoghurt"), [], ALICE)
    repo.create(product)
    category_id = uuid.uuid4()
    with Session(engine) as session, session.begin():
        session.add(CategoryRecord(id=category_id, name="dairy"))
    with Session(engine) as session, session.begin():
        session.add(
            ProductCategoryRecord(
                product_id=product.id, user_id=ALICE.id, category_id=category_id
            )
        )

    found = repo.get(ALICE, ProductName("yoghurt"))

    assert [category.id for category in found.categories] == [category_id]
    assert found.categories[0].name == "dairy"


def test_update_existing_product(repo):
    product = create_product(ProductName("butter"), [], ALICE)
    repo.create(product)

    repo.update(product)

    assert repo.get_by_id(ALICE, product.id).name == "butter"


def test_update_missing_raises(repo):
    product = create_product(ProductName("ghost"), [], ALICE)
    with pytest.raises(ProductNotFoundError):
        repo.update(product)