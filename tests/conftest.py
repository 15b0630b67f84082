import pytest
from fastapi.testclient import TestClient

from wiki.config import Settings
from wiki.main import create_app


@pytest.fixture
def pages_dir(tmp_path):
    directory = tmp_path / "pages"
    directory.mkdir()
    return directory


@pytest.fixture
def settings(pages_dir):
    return Settings(pages_dir=pages_dir)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
