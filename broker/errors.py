"""Error taxonomy shared by the registry, the credential gate and the routes.

Every error carries the HTTP status it maps to so the blueprint error
handler can render it without a lookup table.
"""


class BrokerError(Exception):
    status_code = 500
    default_message = 'Internal error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'success': False, 'error': self.message}


class Unauthenticated(BrokerError):
    status_code = 401
    default_message = 'Invalid or missing credentials'


class PermissionDenied(BrokerError):
    status_code = 403
    default_message = 'Insufficient role for this action'


class NotFound(BrokerError):
    status_code = 404
    default_message = 'Game not found'


class InvalidArgument(BrokerError):
    status_code = 400
    default_message = 'Malformed request'


class ResourceExhausted(BrokerError):
    status_code = 503
    default_message = 'Could not allocate a game id'
