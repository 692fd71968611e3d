from http import HTTPStatus

from flask import Blueprint, request
from flask_cors import cross_origin
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from common.response import error_response, success_response
from controllers.categories_controller import CategoriesController
from schemas.category_schemas import CategorySchema, SubcategorySchema

category_bp = Blueprint('category', __name__)

category_schema = CategorySchema()
subcategory_schema = SubcategorySchema()


@category_bp.route('/api/categories', methods=['GET'])
@cross_origin()
def get_categories():
    """Categories with their subcategories"""
    return success_response(CategoriesController.list_all())


@category_bp.route('/api/categories', methods=['POST'])
@cross_origin()
@jwt_required()
def create_category():
    try:
        data = category_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return error_response("Validation failed", HTTPStatus.UNPROCESSABLE_ENTITY, err.messages)
    return success_response(CategoriesController.create_category(data), HTTPStatus.CREATED)


@category_bp.route('/api/categories/<int:category_id>/subcategories', methods=['POST'])
@cross_origin()
@jwt_required()
def create_subcategory(category_id):
    try:
        data = subcategory_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return error_response("Validation failed", HTTPStatus.UNPROCESSABLE_ENTITY, err.messages)
    return success_response(CategoriesController.create_subcategory(category_id, data), HTTPStatus.CREATED)
