import json
import math

from flask import Blueprint, current_app, request

from broker.api import current_registry, reply, requires
from broker.errors import InvalidArgument
from broker.services.auth import Action


games = Blueprint('games', __name__)


def _reject_constant(name):
    raise InvalidArgument(f'Move body contains non-JSON value {name}')


def _strict_float(text):
    value = float(text)
    if math.isinf(value):
        raise InvalidArgument(f'Move body number {text} is out of range')
    return value


def _validate_move(raw: bytes):
    """Parse ``raw`` as strict UTF-8 JSON; NaN and Infinity are not JSON."""
    try:
        move = json.loads(raw.decode('utf-8'), parse_constant=_reject_constant, parse_float=_strict_float)
    except ValueError:
        raise InvalidArgument('Move body must be JSON')
    if move is None:
        raise InvalidArgument('Move body is required')


def move_reply(payload):
    """Envelope around the stored move bytes, returned exactly as posted."""
    body = b'{"success":true,"data":' + (payload if payload is not None else b'null') + b'}'
    return current_app.response_class(body, status=200, mimetype='application/json')


@games.route('', methods=['GET'])
@requires(Action.CREATE_GAME)
def create_game():
    game_id = current_registry().create_game()
    current_app.logger.info(f'[create] game={game_id}')
    return reply(game_id)


@games.route('/<string:game_id>', methods=['GET'])
@requires(Action.READ_MOVE)
def get_move(game_id):
    return move_reply(current_registry().get_move(game_id))


@games.route('/<string:game_id>', methods=['POST'])
@requires(Action.WRITE_MOVE)
def post_move(game_id):
    """Store the request body verbatim as the game's last move.

    The body must be a JSON value other than null; its contents are not
    inspected.
    """
    raw = request.get_data(cache=True)
    if not raw.strip():
        raise InvalidArgument('Move body is required')
    _validate_move(raw)

    current_registry().put_move(game_id, raw)
    current_app.logger.info(f'[move] game={game_id.upper()} bytes={len(raw)}')
    return move_reply(raw)
