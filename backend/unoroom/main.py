from flask import Blueprint, jsonify
from unoroom import rooms

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the UNO room server!'})

@main.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'activeRoomCount': rooms.active_room_count()})
