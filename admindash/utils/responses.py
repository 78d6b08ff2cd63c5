from flask import jsonify


def success(data=None, status=200):
    """Wrap a payload in the ``{success: true, data: ...}`` envelope."""
    return jsonify({'success': True, 'data': data}), status


def created(data):
    return success(data, 201)
