from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_cors import cross_origin
from flask_jwt_extended import get_jwt_identity, jwt_required, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from marshmallow import ValidationError

from common.response import error_response, success_response
from controllers.product_controller import ProductController
from schemas.product_schemas import CreateProductSchema, UpdateProductSchema

product_bp = Blueprint('product', __name__)

create_product_schema = CreateProductSchema()
update_product_schema = UpdateProductSchema()


def _is_authenticated():
    """Optional JWT: a missing or invalid token just means an anonymous caller."""
    try:
        verify_jwt_in_request(optional=True)
        return get_jwt_identity() is not None
    except (JWTExtendedException, PyJWTError) as e:
        current_app.logger.debug(f"Ignoring invalid token on product listing: {e}")
        return False


@product_bp.route('/api/products', methods=['GET'])
@cross_origin()
def get_products():
    """
    List products.

    Query params: product (name contains), subcategory, category, page, limit.
    Unauthenticated callers only see products with stock.
    """
    result = ProductController.list_products(request.args, authenticated=_is_authenticated())
    return jsonify(result), HTTPStatus.OK


@product_bp.route('/api/products/<int:product_id>', methods=['GET'])
@cross_origin()
def get_product(product_id):
    product = ProductController.get(product_id)
    return success_response([product.serialize()] if product else [])


@product_bp.route('/api/products', methods=['POST'])
@cross_origin()
@jwt_required()
def create_product():
    try:
        data = create_product_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return error_response("Validation failed", HTTPStatus.UNPROCESSABLE_ENTITY, err.messages)

    product = ProductController.create(data)
    return success_response("Product created", HTTPStatus.CREATED, id=product.id)


@product_bp.route('/api/products/<int:product_id>', methods=['PUT', 'PATCH'])
@cross_origin()
@jwt_required()
def update_product(product_id):
    try:
        data = update_product_schema.load(request.get_json(silent=True) or {})
    except ValidationError as err:
        return error_response("Validation failed", HTTPStatus.UNPROCESSABLE_ENTITY, err.messages)

    product = ProductController.update(product_id, data)
    return success_response(product.serialize())


@product_bp.route('/api/products/<int:product_id>', methods=['DELETE'])
@cross_origin()
@jwt_required()
def delete_product(product_id):
    ProductController.delete(product_id)
    return success_response("Product deleted")
