"""Turn an incoming request into an ``Identity`` for the credential gate.

A deployment picks one scheme with AUTH_SCHEME:

- ``basic``: HTTP Basic header, or legacy ``username``/``password`` query args
- ``token``: ``Authorization: Bearer`` header, or legacy ``auth`` query arg
"""

from flask import current_app
from flask_login import AnonymousUserMixin, UserMixin

from broker.services.auth import Identity, Role


def identity_from_basic(req) -> Identity:
    auth = req.authorization
    if auth is not None and auth.type == 'basic':
        return Identity(name=auth.username, secret=auth.password)
    name = req.args.get('username')
    secret = req.args.get('password')
    if name is None and secret is None:
        return Identity()
    return Identity(name=name, secret=secret)


def identity_from_token(req) -> Identity:
    auth = req.authorization
    if auth is not None and auth.type == 'bearer' and auth.token:
        return Identity(token=auth.token)
    token = req.args.get('auth')
    if token is None:
        return Identity()
    return Identity(token=token)


ADAPTERS = {
    'basic': identity_from_basic,
    'token': identity_from_token,
}


class Principal(UserMixin):

    def __init__(self, name: str, role: Role):
        self.id = name
        self.role = role


class Guest(AnonymousUserMixin):

    @property
    def role(self) -> Role:
        return current_app.extensions['credential_gate'].default_role


def load_principal_from_request(req):
    """Flask-Login request loader.

    Returns None when no credentials were presented, so Flask-Login falls
    back to ``Guest``. Bad credentials raise Unauthenticated from the gate.
    """
    adapter = ADAPTERS[current_app.config.get('AUTH_SCHEME', 'token')]
    identity = adapter(req)
    if identity.is_empty:
        return None
    role = current_app.extensions['credential_gate'].authenticate(identity)
    return Principal(identity.name or role.value, role)
