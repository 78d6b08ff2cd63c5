from flask import Blueprint, request
from flask_login import current_user

from admindash.services.tag_service import (
    list_tags, get_tag, create_tag, bulk_create_tags, update_tag, delete_tag,
    tag_item, untag_item,
)
from admindash.utils.decorators import permission_required
from admindash.utils.responses import success, created
from admindash.utils.validators import validate_tag, validate_bulk_tags, validate_item_tag

tags_bp = Blueprint('tags', __name__)


@tags_bp.route('', methods=['GET'])
@permission_required('tags', 'read')
def index():
    return success(list_tags(current_user.id, request.args.get('section')))


@tags_bp.route('/<int:tag_id>', methods=['GET'])
@permission_required('tags', 'read')
def show(tag_id):
    return success(get_tag(tag_id, current_user.id).to_dict())


@tags_bp.route('', methods=['POST'])
@permission_required('tags', 'create')
def create():
    data = validate_tag(request.get_json(silent=True))
    return created(create_tag(current_user.id, data).to_dict())


# Get-or-create global tags by name, e.g. during an import
@tags_bp.route('/bulk', methods=['POST'])
@permission_required('tags', 'create')
def bulk_create():
    names = validate_bulk_tags(request.get_json(silent=True))
    return created([tag.to_dict() for tag in bulk_create_tags(current_user.id, names)])


@tags_bp.route('/<int:tag_id>', methods=['PUT'])
@permission_required('tags', 'update')
def update(tag_id):
    data = validate_tag(request.get_json(silent=True), partial=True)
    return success(update_tag(tag_id, current_user.id, data).to_dict())


@tags_bp.route('/<int:tag_id>', methods=['DELETE'])
@permission_required('tags', 'delete')
def delete(tag_id):
    delete_tag(tag_id, current_user.id)
    return success({'message': 'Tag deleted'})


@tags_bp.route('/<int:tag_id>/items', methods=['POST'])
@permission_required('tags', 'update')
def attach(tag_id):
    data = validate_item_tag(request.get_json(silent=True))
    link = tag_item(current_user.id, tag_id, data['target_kind'], data['target_id'])
    return created({'tag_id': link.tag_id, 'target_kind': link.target_kind,
                    'target_id': link.target_id})


@tags_bp.route('/<int:tag_id>/items', methods=['DELETE'])
@permission_required('tags', 'update')
def detach(tag_id):
    data = validate_item_tag(request.get_json(silent=True))
    removed = untag_item(current_user.id, tag_id, data['target_kind'], data['target_id'])
    return success({'removed': removed})
