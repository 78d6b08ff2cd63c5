from flask import Blueprint, request
from flask_login import current_user

from admindash.services.category_service import (
    list_categories, get_category, create_category, update_category, delete_category,
)
from admindash.utils.decorators import permission_required
from admindash.utils.responses import success, created
from admindash.utils.validators import validate_category

categories_bp = Blueprint('categories', __name__)


@categories_bp.route('', methods=['GET'])
@permission_required('categories', 'read')
def index():
    return success(list_categories(current_user.id, request.args.get('section')))


@categories_bp.route('/<int:category_id>', methods=['GET'])
@permission_required('categories', 'read')
def show(category_id):
    return success(get_category(category_id, current_user.id).to_dict())


@categories_bp.route('', methods=['POST'])
@permission_required('categories', 'create')
def create():
    data = validate_category(request.get_json(silent=True))
    return created(create_category(current_user.id, data).to_dict())


@categories_bp.route('/<int:category_id>', methods=['PUT'])
@permission_required('categories', 'update')
def update(category_id):
    data = validate_category(request.get_json(silent=True), partial=True)
    return success(update_category(category_id, current_user.id, data).to_dict())


@categories_bp.route('/<int:category_id>', methods=['DELETE'])
@permission_required('categories', 'delete')
def delete(category_id):
    delete_category(category_id, current_user.id)
    return success({'message': 'Category deleted'})
