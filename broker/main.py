from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'games': len(current_app.extensions['game_registry'])})
