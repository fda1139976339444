"""Game API endpoints."""
from flask import Blueprint, request, jsonify
from cosmic_paperclip.actions import SetAllocation, Reset, Tick, action_from_dict
from cosmic_paperclip.allocation import set_allocation_axis
from cosmic_paperclip.game_data_loader import get_game_data_loader
from cosmic_paperclip.game_engine import GameEngine
from cosmic_paperclip.models import db, DatabaseStore, GameSession
from cosmic_paperclip.storage import SavePersistence

game_bp = Blueprint('game', __name__)

def _load_engine(session_id):
    """Hydrate the engine for a session from its save store."""
    session = db.get_or_404(GameSession, session_id)
    engine = GameEngine.load(SavePersistence(DatabaseStore(session.id)))
    return session, engine

def _session_id(data):
    session_id = data.get('session_id')
    if isinstance(session_id, bool) or not isinstance(session_id, int):
        return None
    return session_id

@game_bp.route('/start', methods=['POST'])
def start_game():
    """Start a new game session."""
    session = GameSession()
    db.session.add(session)
    db.session.commit()

    engine = GameEngine.load(SavePersistence(DatabaseStore(session.id)))
    engine.flush()

    return jsonify({
        'session_id': session.id,
        'game_state': engine.get_state()
    }), 201

@game_bp.route('/state/<int:session_id>', methods=['GET'])
def get_game_state(session_id):
    """Get current game state."""
    _, engine = _load_engine(session_id)
    return jsonify({'game_state': engine.get_state()})

@game_bp.route('/action', methods=['POST'])
def game_action():
    """Dispatch one action and persist the resulting state.

    set_allocation takes either {"allocation": {...}} or {"axis": ..., "value": ...};
    the latter rebalances the two untouched axes.
    """
    data = request.get_json(silent=True) or {}
    session_id = _session_id(data)
    if session_id is None:
        return jsonify({'error': 'Missing session_id'}), 400

    _, engine = _load_engine(session_id)

    action_type = data.get('action_type')
    action_data = data.get('action_data') or {}
    try:
        if action_type == SetAllocation.action_type and isinstance(action_data, dict) and 'axis' in action_data:
            value = action_data.get('value')
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError("value must be a number")
            action = SetAllocation(allocation=set_allocation_axis(engine.state.allocation, action_data['axis'], value))
        else:
            action = action_from_dict(action_type, action_data)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    if isinstance(action, Tick):
        engine.tick(action.dt)
    else:
        engine.dispatch(action)
    if not isinstance(action, Reset):
        engine.flush()

    return jsonify({'game_state': engine.get_state()})

@game_bp.route('/tick', methods=['POST'])
def tick_game():
    """Advance the simulation; dt is clamped to [0, MAX_TICK_SECONDS]."""
    data = request.get_json(silent=True) or {}
    session_id = _session_id(data)
    if session_id is None:
        return jsonify({'error': 'Missing session_id'}), 400

    dt = data.get('dt', 0)
    if isinstance(dt, bool) or not isinstance(dt, (int, float)):
        return jsonify({'error': 'dt must be a number'}), 400

    _, engine = _load_engine(session_id)
    engine.tick(dt)
    engine.flush()

    return jsonify({'game_state': engine.get_state()})

@game_bp.route('/save', methods=['POST'])
def save_game():
    """Persist the current state now (e.g. when the page is hidden)."""
    data = request.get_json(silent=True) or {}
    session_id = _session_id(data)
    if session_id is None:
        return jsonify({'error': 'Missing session_id'}), 400

    _, engine = _load_engine(session_id)
    engine.flush()
    return jsonify({'success': True, 'message': 'Game state saved'})

@game_bp.route('/reset', methods=['POST'])
def reset_game():
    """Discard the game and clear its save store."""
    data = request.get_json(silent=True) or {}
    session_id = _session_id(data)
    if session_id is None:
        return jsonify({'error': 'Missing session_id'}), 400

    _, engine = _load_engine(session_id)
    engine.dispatch(Reset())

    return jsonify({'game_state': engine.get_state()})

@game_bp.route('/stages', methods=['GET'])
def list_stages():
    """Read-only stage table."""
    stages = get_game_data_loader().load_stages()
    return jsonify({'stages': [stage.to_dict() for stage in stages]})
