import pytest

from catalog.app import create_app
from commonlib.config import CatalogConfig


@pytest.fixture
def config(tmp_path):
    return CatalogConfig(
        base_dir=tmp_path,
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "uploads",
        secret_key="test-secret",
        allowed_origins=("http://localhost",),
        max_upload_bytes=1024,
    )


@pytest.fixture
def app(config):
    flask_app = create_app(config)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
