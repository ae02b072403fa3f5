from flask import Blueprint, redirect, url_for, request, jsonify
from flask_wtf.csrf import generate_csrf
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import login_user, logout_user, login_required
from models import db, User

auth = Blueprint('auth', __name__)

def _credentials():
    data = request.get_json(silent=True) or request.form
    return (data.get('username') or '').strip(), data.get('password') or ''

@auth.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'POST':
        username, password = _credentials()
        user = User.query.filter_by(username=username).first()
        if user and check_password_hash(user.password_hash, password):
            login_user(user)
            return redirect(url_for('board.board'))
        return jsonify({'error': 'Invalid username or password'}), 401
    return jsonify({'csrf_token': generate_csrf()})

@auth.route('/signup', methods=['GET', 'POST'])
def signup():
    if request.method == 'POST':
        username, password = _credentials()
        if not username or not password:
            return jsonify({'error': 'Username and password are required'}), 400
        if User.query.filter_by(username=username).first():
            return jsonify({'error': 'Username already exists'}), 409
        new_user = User(username=username, password_hash=generate_password_hash(password, method='scrypt'))
        db.session.add(new_user)
        db.session.commit()
        login_user(new_user)
        return redirect(url_for('board.board'))
    return jsonify({'csrf_token': generate_csrf()})

@auth.route('/logout')
@login_required
def logout():
    logout_user()
    return redirect(url_for('auth.login'))
