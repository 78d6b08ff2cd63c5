from datetime import datetime, timezone

from flask import Blueprint, current_app, request
from flask_login import login_required, current_user

from admindash.errors import UnauthorizedError, ValidationError
from admindash.extensions import db, limiter
from admindash.models.user import User
from admindash.services.token_service import generate_token
from admindash.utils.responses import success

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/token', methods=['POST'])
@limiter.limit("5 per minute", methods=["POST"])
def token():
    data = request.get_json(silent=True)
    if not data or not data.get('username') or not data.get('password'):
        raise ValidationError('username and password are required')

    user = User.query.filter_by(username=data['username']).first()
    if not user or not user.check_password(data['password']) or not user.is_active:
        raise UnauthorizedError('Invalid username or password')

    user.last_login = datetime.now(timezone.utc)
    db.session.commit()
    return success({
        'token': generate_token(user.id, user.role),
        'expires_in': current_app.config['TOKEN_EXPIRY_HOURS'] * 3600,
        'user': user.to_dict(),
    })


@auth_bp.route('/me')
@login_required
def me():
    return success(current_user.to_dict())
