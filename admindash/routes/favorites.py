"""Favorites API."""

from flask import Blueprint, request
from flask_login import current_user

from admindash.services.favorite_service import (
    get_user_favorites, get_favorite, create_favorite, update_favorite,
    delete_favorite, reorder_favorites, serialize_favorite,
)
from admindash.utils.decorators import permission_required
from admindash.utils.responses import success, created
from admindash.utils.validators import validate_favorite, validate_reorder

favorites_bp = Blueprint('favorites', __name__)


@favorites_bp.route('', methods=['GET'])
@permission_required('favorites', 'read')
def index():
    return success(get_user_favorites(current_user.id))


@favorites_bp.route('/<int:favorite_id>', methods=['GET'])
@permission_required('favorites', 'read')
def show(favorite_id):
    fav = get_favorite(favorite_id, current_user.id)
    return success(serialize_favorite(fav))


@favorites_bp.route('', methods=['POST'])
@permission_required('favorites', 'create')
def create():
    data = validate_favorite(request.get_json(silent=True))
    fav = create_favorite(current_user.id, data)
    return created(serialize_favorite(fav))


@favorites_bp.route('/<int:favorite_id>', methods=['PUT'])
@permission_required('favorites', 'update')
def update(favorite_id):
    data = validate_favorite(request.get_json(silent=True), partial=True)
    fav = update_favorite(favorite_id, current_user.id, data)
    return success(serialize_favorite(fav))


@favorites_bp.route('/<int:favorite_id>', methods=['DELETE'])
@permission_required('favorites', 'delete')
def delete(favorite_id):
    delete_favorite(favorite_id, current_user.id)
    return success({'message': 'Favorite deleted'})


@favorites_bp.route('/reorder', methods=['PUT', 'POST'])
@permission_required('favorites', 'update')
def reorder():
    items = validate_reorder(request.get_json(silent=True))
    return success(reorder_favorites(current_user.id, items))
