from flask import Blueprint

from admindash.extensions import db
from admindash.utils.responses import success

main_bp = Blueprint('main', __name__)


@main_bp.route('/health')
def health():
    db.session.execute(db.text('SELECT 1'))
    return success({'status': 'ok'})
