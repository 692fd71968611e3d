from flask import current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import Conflict, NotFound

from common.database import db
from models.category import Category
from models.subcategory import Subcategory


class CategoriesController:
    @staticmethod
    def list_all():
        """All categories with their subcategories nested"""
        categories = Category.query.order_by(Category.id).all()
        return [category.serialize(include_subcategories=True) for category in categories]

    @staticmethod
    def create_category(data):
        if Category.query.filter_by(name=data['name']).first():
            raise Conflict(f"Category '{data['name']}' already exists.")

        category = Category(name=data['name'])
        try:
            category.save()
        except IntegrityError as e:
            db.session.rollback()
            current_app.logger.error(f"Integrity error creating category: {e}")
            raise Conflict(f"Category '{data['name']}' already exists.")
        return category.serialize(include_subcategories=True)

    @staticmethod
    def create_subcategory(category_id, data):
        category = db.session.get(Category, category_id)
        if not category:
            raise NotFound(f"Category with ID {category_id} not found.")

        if Subcategory.query.filter_by(category_id=category.id, name=data['name']).first():
            raise Conflict(f"Subcategory '{data['name']}' already exists in category '{category.name}'.")

        subcategory = Subcategory(name=data['name'], category_id=category.id)
        try:
            subcategory.save()
        except IntegrityError as e:
            db.session.rollback()
            current_app.logger.error(f"Integrity error creating subcategory for category {category_id}: {e}")
            raise Conflict(f"Subcategory '{data['name']}' already exists in category '{category.name}'.")
        return subcategory.serialize()
