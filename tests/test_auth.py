from models import User

def test_signup(client):
    response = client.post('/signup', data={'username': 'newuser', 'password': 'newpassword'}, follow_redirects=True)
    assert response.status_code == 200
    assert 'columns' in response.json # Redirects to the board
    assert User.query.filter_by(username='newuser').first() is not None

def test_signup_existing_user(client):
    # Create user first
    client.post('/signup', data={'username': 'existing', 'password': 'password'})
    # Try again
    response = client.post('/signup', data={'username': 'existing', 'password': 'password'})
    assert response.status_code == 409
    assert response.json['error'] == 'Username already exists'

def test_signup_missing_fields(client):
    response = client.post('/signup', json={'username': 'nopass'})
    assert response.status_code == 400

def test_login(client):
    client.post('/signup', data={'username': 'loginuser', 'password': 'password'})
    client.get('/logout')

    response = client.post('/login', json={'username': 'loginuser', 'password': 'password'}, follow_redirects=True)
    assert response.status_code == 200
    assert response.json['wip']['limit'] == 2

def test_login_invalid(client):
    response = client.post('/login', data={'username': 'wrong', 'password': 'wrong'})
    assert response.status_code == 401
    assert response.json['error'] == 'Invalid username or password'

def test_logout(client):
    client.post('/signup', data={'username': 'outuser', 'password': 'password'})
    response = client.get('/logout', follow_redirects=True)
    assert 'csrf_token' in response.json
    assert client.get('/board').status_code == 401
