"""Flask extensions initialization."""
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Database
db = SQLAlchemy()

# Login manager (bearer tokens, see create_app)
login_manager = LoginManager()

# Database migrations
migrate = Migrate()

# CSRF protection (JSON API blueprints are exempted in the factory)
csrf = CSRFProtect()

# Rate limiting
limiter = Limiter(key_func=get_remote_address)
