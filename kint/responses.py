from flask import jsonify, request


def json_success(message='OK', status=200, **extra):
    """Create a standard JSON success response."""
    payload = {'success': True}
    if message is not None:
        payload['message'] = message
    if extra:
        payload.update(extra)
    return jsonify(payload), status


def json_error(message, status=400, **extra):
    """Create a standard JSON error response."""
    payload = {'success': False, 'message': message}
    if extra:
        payload.update(extra)
    return jsonify(payload), status


def wants_json():
    """True for API calls, JSON bodies and clients that prefer JSON."""
    if request.path.startswith('/api/') or request.is_json:
        return True
    accept = request.accept_mimetypes
    return accept['application/json'] > accept['text/html']
