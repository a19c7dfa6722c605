"""Flask blueprints: ``public`` site, ``auth`` login, ``admin`` panel and ``api``."""

from flask import request


def request_payload():
    """Submitted fields from a JSON body or a form post."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()
