from flask import Blueprint, current_app

from broker.api import current_registry, reply, requires
from broker.services.auth import Action


admin = Blueprint('admin', __name__)


@admin.route('/state', methods=['GET'])
@requires(Action.ADMIN_STATE)
def state():
    games = current_registry().snapshot()
    games.sort(key=lambda g: g['created_at'])
    return reply(games)


@admin.route('/clear', methods=['DELETE'])
@requires(Action.ADMIN_CLEAR)
def clear():
    removed = current_registry().clear_all()
    current_app.logger.info(f'[clear] removed={removed}')
    return reply({'cleared': removed})


# Older clients reset the board with a plain GET.
admin.add_url_rule('/reset', 'reset', clear, methods=['GET'])
