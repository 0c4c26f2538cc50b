import json

import pytest

from grocery.app import create_app
from grocerylib.config import load_app_config


@pytest.fixture
def app_config(tmp_path):
    return load_app_config(tmp_path, env={})


@pytest.fixture
def app(app_config):
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def catalog(app):
    return app.extensions["product_catalog"]


@pytest.fixture
def data_file(app_config):
    return app_config.data_file


@pytest.fixture
def seed_products(data_file):
    def _seed(products):
        data_file.write_text(json.dumps(products, indent=2), encoding="utf-8")
        return products

    return _seed


@pytest.fixture
def apple():
    return {
        "name": "Apple",
        "category": "Fruits",
        "price": 25,
        "inStock": True,
        "quantity": 100,
        "brand": "FarmFresh",
    }
