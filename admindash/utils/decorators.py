from functools import wraps

from flask_login import current_user, login_required

from admindash.errors import ForbiddenError


def permission_required(module, action):
    """Require an authenticated user whose role allows ``action`` on ``module``."""
    def decorator(f):
        @wraps(f)
        @login_required
        def decorated_function(*args, **kwargs):
            if not current_user.can(module, action):
                raise ForbiddenError(f"You don't have permission to {action} {module}")
            return f(*args, **kwargs)
        return decorated_function
    return decorator
