from flask import Blueprint

board_bp = Blueprint('board', __name__)
habits_bp = Blueprint('habits', __name__)
settings_bp = Blueprint('settings', __name__)
api_bp = Blueprint('api', __name__)

from . import board, habits, settings, api
