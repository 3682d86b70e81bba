"""
Flask REST API for PocketCalc
Exposes the calculator engine and its history as JSON endpoints
"""
import logging

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

import config
import keypad
from calculator import Calculator

logger = logging.getLogger(__name__)

calculator_bp = Blueprint('calculator', __name__)

# Public operations callable through /api/actions/<name>
ACTIONS = {
    'input_number', 'input_operation', 'calculate', 'clear', 'clear_entry',
    'backspace', 'toggle_sign', 'percent', 'square_root', 'reciprocal',
    'memory_clear', 'memory_recall', 'memory_add', 'memory_subtract',
    'clear_history',
}
VALUE_ACTIONS = {'input_number', 'input_operation'}


def get_calculator():
    return current_app.extensions['calculator']


def _state_response(status=200):
    return jsonify({'success': True, 'data': get_calculator().state.to_dict()}), status


def _error(message, status=400):
    return jsonify({'success': False, 'error': message}), status


@calculator_bp.route('/api')
def api_info():
    """API information"""
    return jsonify({
        'success': True,
        'data': {
            'name': config.APP_NAME,
            'version': config.VERSION,
            'endpoints': [
                'GET /api/state',
                'POST /api/press',
                'POST /api/actions/<name>',
                'GET /api/calculations',
                'DELETE /api/calculations',
            ],
        }
    })


@calculator_bp.route('/api/state')
def get_state():
    """Get the full calculator state"""
    return _state_response()


@calculator_bp.route('/api/press', methods=['POST'])
def press_button():
    """Press a keypad button"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get('button'), str):
        return _error("Request body must be JSON with a 'button' string")

    try:
        keypad.press(get_calculator(), payload['button'])
    except ValueError as e:
        return _error(str(e))
    return _state_response()


@calculator_bp.route('/api/actions/<name>', methods=['POST'])
def run_action(name):
    """Run one public calculator operation by name"""
    if name not in ACTIONS:
        return _error(f"Unknown action: {name}", 404)

    operation = getattr(get_calculator(), name)
    if name in VALUE_ACTIONS:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or 'value' not in payload:
            return _error("Request body must be JSON with a 'value'")
        try:
            operation(str(payload['value']))
        except ValueError as e:
            return _error(str(e))
    else:
        operation()
    return _state_response()


@calculator_bp.route('/api/calculations')
def get_calculations():
    """Get calculation history, newest first"""
    try:
        limit = int(request.args.get('limit', config.MAX_HISTORY_ITEMS))
    except ValueError:
        return _error("limit must be an integer")
    if limit < 0:
        return _error("limit must not be negative")

    entries = get_calculator().history[:limit]
    return jsonify({
        'success': True,
        'data': [entry.to_dict() for entry in entries],
    })


@calculator_bp.route('/api/calculations', methods=['DELETE'])
def delete_calculations():
    """Clear calculation history"""
    get_calculator().clear_history()
    return _state_response()


def create_app(calculator=None):
    """Build the Flask app around one calculator instance"""
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes
    app.extensions['calculator'] = calculator or Calculator()
    app.register_blueprint(calculator_bp)
    return app
