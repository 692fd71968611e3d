"""Shared fixtures: application, database, auth headers and seeded categories."""

import pytest
from flask_jwt_extended import create_access_token

from app import create_app
from common.database import db
from models.category import Category
from models.subcategory import Subcategory


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / 'storage'


@pytest.fixture
def app(storage_root):
    app = create_app('testing')
    app.config['UPLOAD_FOLDER'] = str(storage_root)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = create_access_token(identity='1')
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def catalog(app):
    """Two categories; subcategories 5 and 6 belong to 'Vegetables', 7 to 'Tools'."""
    vegetables = Category(id=1, name='Vegetables')
    tools = Category(id=2, name='Tools')
    db.session.add_all([vegetables, tools])
    db.session.add_all([
        Subcategory(id=5, name='Fresh', category_id=1),
        Subcategory(id=6, name='Organic', category_id=1),
        Subcategory(id=7, name='Hand tools', category_id=2),
    ])
    db.session.commit()
    return {'vegetables': vegetables, 'tools': tools}


@pytest.fixture
def product_payload():
    def _payload(**overrides):
        payload = {
            'name': 'Tomate',
            'characteristics': 'c',
            'benefits': ['b1', 'b2'],
            'compatibility': 'x',
            'price': 2.5,
            'stock': 10,
            'category_id': 1,
            'subcategory_id': [5],
        }
        payload.update(overrides)
        return payload
    return _payload


