import os

os.environ['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'

import pytest
from app import app
from models import db, User
from datetime import datetime
from werkzeug.security import generate_password_hash
from services.snapshot import HabitState, CardState, CardStatus

@pytest.fixture
def client():
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False # Disable CSRF for easier testing

    with app.test_client() as client:
        with app.app_context():
            db.create_all()
            yield client
            db.session.remove()
            db.drop_all()

@pytest.fixture
def auth_client(client):
    user = User(username='testuser', password_hash=generate_password_hash('password', method='scrypt'))
    db.session.add(user)
    db.session.commit()

    client.post('/login', data={'username': 'testuser', 'password': 'password'})
    return client, user

@pytest.fixture
def now():
    return datetime(2026, 3, 10, 9, 30)

@pytest.fixture
def make_habit():
    def _make(id=1, name=None, **kwargs):
        return HabitState(id=id, name=name or f"Habit {id}", **kwargs)
    return _make

@pytest.fixture
def make_card(now):
    def _make(id, habit_id=1, status=CardStatus.TODO, **kwargs):
        kwargs.setdefault('created_at', now.replace(hour=7))
        return CardState(
            id=id,
            habit_id=habit_id,
            habit_name=f"Habit {habit_id}",
            emoji='🧹',
            color_hex='007AFF',
            status=status,
            **kwargs
        )
    return _make
