"""Bearer tokens for the JSON API.

Tokens are HS256 JWTs signed with ``SECRET_KEY``. The payload carries the
user id and role plus a ``scope`` claim, so a token minted for another
purpose with the same key is not accepted as an API credential.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

logger = logging.getLogger(__name__)

TOKEN_SCOPE = 'api'
ALGORITHM = 'HS256'


def generate_token(user_id, role=None, expiry_hours=None):
    """Issue an API token for ``user_id``, valid for TOKEN_EXPIRY_HOURS by default."""
    if expiry_hours is None:
        expiry_hours = current_app.config['TOKEN_EXPIRY_HOURS']
    issued_at = datetime.now(timezone.utc)
    payload = {
        'user_id': user_id,
        'role': role,
        'scope': TOKEN_SCOPE,
        'iat': issued_at,
        'exp': issued_at + timedelta(hours=expiry_hours),
    }
    return jwt.encode(payload, current_app.config['SECRET_KEY'], algorithm=ALGORITHM)


def validate_token(token):
    """Return the payload of a valid API token, or None."""
    try:
        payload = jwt.decode(
            token,
            current_app.config['SECRET_KEY'],
            algorithms=[ALGORITHM],
            options={'require': ['exp', 'user_id']},
        )
    except jwt.ExpiredSignatureError:
        logger.debug('Rejected expired token')
        return None
    except jwt.InvalidTokenError as e:
        logger.debug('Rejected token: %s', e)
        return None

    if payload.get('scope') != TOKEN_SCOPE:
        logger.debug('Rejected token with scope %r', payload.get('scope'))
        return None
    return payload
