"""Credential gate and role policy.

The gate never sees HTTP: request adapters hand it an ``Identity`` and it
answers with a ``Role``. ``authorize`` is a pure function over the two enums.
"""

import hmac
import json
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from flask_bcrypt import check_password_hash

from broker.errors import InvalidArgument, PermissionDenied, Unauthenticated


class Role(str, Enum):
    ADMIN = 'admin'
    USER = 'user'
    GUEST = 'guest'


class Action(str, Enum):
    CREATE_GAME = 'createGame'
    READ_MOVE = 'readMove'
    WRITE_MOVE = 'writeMove'
    ADMIN_STATE = 'adminState'
    ADMIN_CLEAR = 'adminClear'


ADMIN_ACTIONS = frozenset({Action.ADMIN_STATE, Action.ADMIN_CLEAR})
GAME_ACTIONS = frozenset({Action.CREATE_GAME, Action.READ_MOVE, Action.WRITE_MOVE})


@dataclass(frozen=True)
class Identity:
    name: Optional[str] = None
    secret: Optional[str] = None
    token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.name is None and self.secret is None and self.token is None


def parse_role(value) -> Role:
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise InvalidArgument(f'Unknown role {value!r}')


def parse_actions(values: Iterable[str]) -> frozenset:
    actions = set()
    for value in values:
        value = value.strip()
        if not value:
            continue
        try:
            actions.add(Action(value))
        except ValueError:
            raise InvalidArgument(f'Unknown action {value!r}')
    return frozenset(actions)


def authorize(role: Role, action: Action, guest_actions: Iterable[Action] = ()) -> None:
    """Raise PermissionDenied unless ``role`` may perform ``action``.

    Admin actions are admin-only. Game actions are open to users and admins,
    and to guests only for actions a deployment lists in ``guest_actions``.
    """
    if role is Role.ADMIN:
        return
    if action in ADMIN_ACTIONS:
        raise PermissionDenied(f'{action.value} requires admin')
    if role is Role.USER:
        return
    if action in guest_actions:
        return
    raise PermissionDenied(f'{action.value} is not open to {role.value}')


class CredentialGate:

    def __init__(
        self,
        users: Optional[Dict[str, dict]] = None,
        tokens: Optional[Dict[str, Role]] = None,
        default_role: Role = Role.GUEST,
        guest_actions: Iterable[Action] = (),
        check_password: Callable[[str, str], bool] = check_password_hash,
    ):
        # users: name -> {'password_hash': bcrypt hash, 'role': Role}
        self.users = users or {}
        self.tokens = tokens or {}
        self.default_role = default_role
        self.guest_actions = frozenset(guest_actions)
        self.check_password = check_password

    def authenticate(self, identity: Optional[Identity]) -> Role:
        if identity is None or identity.is_empty:
            return self.default_role
        if identity.token is not None:
            return self._match_token(identity.token)
        return self._match_user(identity.name, identity.secret)

    def _match_token(self, token: str) -> Role:
        presented = token.encode('utf-8')
        matched = None
        # no early exit
        for known, role in self.tokens.items():
            if hmac.compare_digest(presented, known.encode('utf-8')) and matched is None:
                matched = role
        if matched is None:
            raise Unauthenticated('Invalid token')
        return matched

    def _match_user(self, name: Optional[str], secret: Optional[str]) -> Role:
        entry = self.users.get(name or '')
        if entry is None or not secret:
            raise Unauthenticated('Invalid username or password')
        try:
            ok = self.check_password(entry['password_hash'], secret)
        except ValueError:
            # malformed hash in the credentials table
            ok = False
        if not ok:
            raise Unauthenticated('Invalid username or password')
        return entry['role']

    def authorize(self, role: Role, action: Action) -> None:
        authorize(role, action, self.guest_actions)

    @classmethod
    def from_config(cls, config) -> 'CredentialGate':
        """Build a gate from a Flask config mapping.

        Legacy shared tokens (CLIENT_AUTH, ADMIN_AUTH) and the optional JSON
        credentials file are merged; the file wins on conflicts.
        """
        tokens = {}
        if config.get('CLIENT_AUTH'):
            tokens[config['CLIENT_AUTH']] = Role.USER
        if config.get('ADMIN_AUTH'):
            tokens[config['ADMIN_AUTH']] = Role.ADMIN
        users = _parse_users(config.get('CREDENTIALS'))
        for token, role in (config.get('TOKENS') or {}).items():
            tokens[token] = parse_role(role)

        path = config.get('CREDENTIALS_FILE')
        if path:
            file_users, file_tokens = load_credentials_file(path)
            users.update(file_users)
            tokens.update(file_tokens)

        guest_actions = config.get('GUEST_ACTIONS') or ()
        if isinstance(guest_actions, str):
            guest_actions = guest_actions.split(',')
        return cls(
            users=users,
            tokens=tokens,
            default_role=parse_role(config.get('DEFAULT_ROLE', 'guest')),
            guest_actions=parse_actions(guest_actions),
        )


def _parse_users(entries) -> Dict[str, dict]:
    return {
        name: {'password_hash': entry['password_hash'], 'role': parse_role(entry.get('role', 'user'))}
        for name, entry in (entries or {}).items()
    }


def load_credentials_file(path: str):
    """Read ``{"users": {name: {password_hash, role}}, "tokens": {token: role}}``."""
    with open(path, encoding='utf-8') as fh:
        data = json.load(fh)
    users = _parse_users(data.get('users'))
    tokens = {token: parse_role(role) for token, role in (data.get('tokens') or {}).items()}
    return users, tokens
