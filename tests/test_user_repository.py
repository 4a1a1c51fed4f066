import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError

from lica.domain import Email, User, create_user
from lica.errors import NotFoundError
from lica.schema import create_tables
from lica.user_repository import SqlUserRepository


@pytest.fixture
def repository(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'users.sqlite'}")
    create_tables(engine)
    yield SqlUserRepository(engine)
    engine.dispose()


def test_created_user_can_be_found(repository):
    user = create_user(Email("alice@example.com"))
    repository.create(user)
    assert repository.get_by_email(Email("alice@example.com")) == user


def test_unknown_email_gives_empty_user(repository):
    assert repository.get_by_email(Email("ghost@example.com")) == User()


def test_duplicate_email_is_rejected(repository):
    repository.create(create_user(Email("bob@example.com")))
    with pytest.raises(IntegrityError):
        repository.create(create_user(Email("bob@example.com")))


def test_update_email(repository):
    user = create_user(Email("carol@example.com"))
    repository.create(user)
    repository.update_email(user.id, Email("carol.new@example.com"))
    assert repository.get_by_email(Email("carol.new@example.com")).id == user.id
    assert repository.get_by_email(Email("carol@example.com")) == User()


def test_update_email_of_unknown_user_fails(repository):
    ghost = create_user(Email("ghost@example.com"))
    with pytest.raises(NotFoundError):
        repository.update_email(ghost.id, Email("other@example.com"))