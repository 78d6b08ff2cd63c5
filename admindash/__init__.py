import os

from flask import Flask, g

from admindash.config import config
from admindash.extensions import db, migrate, login_manager, csrf, limiter


def create_app(config_name=None):
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'default')

    app = Flask(__name__)
    app.config.from_object(config.get(config_name, config['default']))

    if config_name == 'production' and app.config['SECRET_KEY'] == 'dev-secret-key-change-me':
        raise RuntimeError('Set SECRET_KEY environment variable for production')

    app.logger.setLevel(app.config['LOG_LEVEL'])

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    if not app.config.get('RATELIMIT_ENABLED', True):
        limiter.enabled = False

    # Import models so Alembic sees them
    from admindash import models  # noqa: F401

    _init_identity()

    from admindash.errors import register_error_handlers
    register_error_handlers(app)

    # Register blueprints
    from admindash.routes.main import main_bp
    from admindash.routes.auth import auth_bp
    from admindash.routes.favorites import favorites_bp
    from admindash.routes.categories import categories_bp
    from admindash.routes.tags import tags_bp
    from admindash.routes.search import search_bp

    api_blueprints = [
        (main_bp, '/api/v1'),
        (auth_bp, '/api/v1/auth'),
        (favorites_bp, '/api/v1/favorites'),
        (categories_bp, '/api/v1/categories'),
        (tags_bp, '/api/v1/tags'),
        (search_bp, '/api/v1/search'),
    ]
    for blueprint, url_prefix in api_blueprints:
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        # Bearer-token API, no cookies to protect
        csrf.exempt(blueprint)

    @app.before_request
    def reset_request_identity():
        # Identity is re-read from each request's bearer token, even when
        # requests share an application context.
        g.pop('_login_user', None)

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        if not app.debug and not app.testing:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    return app


def _init_identity():
    from admindash.errors import UnauthorizedError
    from admindash.models.user import User
    from admindash.services.token_service import validate_token

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_request(request):
        header = request.headers.get('Authorization', '')
        if not header.startswith('Bearer '):
            return None
        payload = validate_token(header[7:])
        if not payload:
            return None
        user = db.session.get(User, payload.get('user_id'))
        if user is None or not user.is_active:
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        raise UnauthorizedError('Missing or invalid authorization token')
