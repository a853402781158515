from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the tic-tac-toe game server!'})

@main.route('/api/health')
def health():
    controller = current_app.extensions['games']
    matchmaker = current_app.extensions['matchmaker']
    return jsonify({
        'status': 'ok',
        'sessions': controller.registry.session_count(),
        'waiting_players': matchmaker.waiting_count(),
    })
