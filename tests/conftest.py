import pytest
from fastapi.testclient import TestClient

from todolist.db import StoragePool
from todolist.main import create_app
from todolist.repositories import SQLRepository
from todolist.usecase import TodoUseCase


@pytest.fixture
def pool(tmp_path):
    p = StoragePool(str(tmp_path / "todo.db"), pool_size=5, timeout=2.0)
    p.initialize()
    yield p
    p.dispose()


@pytest.fixture
def repository(pool):
    return SQLRepository(pool)


@pytest.fixture
def use_case(repository):
    return TodoUseCase(repository)


@pytest.fixture
def client(use_case, pool):
    app = create_app(use_case, pool=pool)
    with TestClient(app) as c:
        yield c
