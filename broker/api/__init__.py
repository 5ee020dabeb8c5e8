"""HTTP blueprints and the helpers they share."""

from functools import wraps

from flask import current_app, jsonify
from flask_login import current_user

from broker.errors import PermissionDenied, Unauthenticated
from broker.services.auth import Action


def current_registry():
    return current_app.extensions['game_registry']


def reply(data=None, status=200):
    return jsonify({'success': True, 'data': data}), status


def requires(action: Action):
    """Reject the request unless the caller's role may perform ``action``.

    A denied anonymous caller is told to authenticate (401); a denied
    authenticated caller gets 403.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            gate = current_app.extensions['credential_gate']
            try:
                gate.authorize(current_user.role, action)
            except PermissionDenied as exc:
                if current_user.is_anonymous:
                    raise Unauthenticated(f'{action.value} requires credentials') from exc
                current_app.logger.info(f'[denied] user={current_user.get_id()} action={action.value}')
                raise
            return view(*args, **kwargs)
        return wrapped
    return decorator
