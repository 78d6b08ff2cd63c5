from flask import Blueprint, request
from flask_login import current_user

from admindash.services.search_service import (
    global_search, get_search_suggestions, MIN_QUERY_LENGTH,
)
from admindash.utils.decorators import permission_required
from admindash.utils.responses import success
from admindash.utils.validators import validate_search_args

search_bp = Blueprint('search', __name__)


# GET /api/v1/search?q=deploy&modules=script,note&tags=ops&categories=infra
@search_bp.route('', methods=['GET'])
@permission_required('search', 'read')
def search():
    args = validate_search_args(request.args)
    result = global_search(
        current_user.id, args['q'],
        modules=args['modules'], tags=args['tags'],
        categories=args['categories'], limit=args['limit'],
    )
    return success(result)


@search_bp.route('/suggestions', methods=['GET'])
@permission_required('search', 'read')
def suggestions():
    query = (request.args.get('q') or '').strip()
    if len(query) < MIN_QUERY_LENGTH:
        return success([])
    return success(get_search_suggestions(current_user.id, query))
