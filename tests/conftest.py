import pytest

from db import ProjectStore, UserStore, init_db, make_engine


@pytest.fixture
def engine():
    eng = make_engine("sqlite://")
    init_db(eng)
    return eng


@pytest.fixture
def store(engine):
    return ProjectStore(engine)


@pytest.fixture
def users(engine):
    return UserStore(engine)
