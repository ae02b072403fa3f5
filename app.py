import os
import logging
from datetime import datetime
from flask import Flask, jsonify
from flask_login import LoginManager
from flask_migrate import Migrate
from dotenv import load_dotenv
from models import db, User
from auth import auth
from extensions import csrf
from services.errors import TidystreakError

load_dotenv()

app = Flask(__name__)

app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev_key_change_in_prod')
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('SQLALCHEMY_DATABASE_URI', 'sqlite:///db.sqlite3')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['WTF_CSRF_TIME_LIMIT'] = None
app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')

logging.basicConfig(
    level=app.config['LOG_LEVEL'],
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

db.init_app(app)
migrate = Migrate(app, db)
csrf.init_app(app)

login_manager = LoginManager()
login_manager.login_view = 'auth.login'
login_manager.init_app(app)

@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))

@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'error': 'UNAUTHORIZED'}), 401

@app.errorhandler(TidystreakError)
def handle_tidystreak_error(error):
    if error.status_code >= 500:
        app.logger.error("Request failed: %s", error)
    return jsonify(error.to_dict()), error.status_code

@app.route('/health')
def health():
    return jsonify({'status': 'ok', 'time': datetime.now().isoformat()})

from routes import board_bp, habits_bp, settings_bp, api_bp

app.register_blueprint(auth)
app.register_blueprint(board_bp)
app.register_blueprint(habits_bp, url_prefix='/habits')
app.register_blueprint(settings_bp, url_prefix='/settings')
app.register_blueprint(api_bp, url_prefix='/api')

if __name__ == '__main__':
    app.run(debug=True)
