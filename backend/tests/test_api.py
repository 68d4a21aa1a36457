from conftest import register, login


def test_register_and_login(client):
    res = register(client, email='a@example.com', real_name='Alice')
    assert res.status_code == 200
    assert res.get_json()['message'] == 'User registered successfully'

    res = login(client)
    assert res.status_code == 200

    session_user = client.get('/session').get_json()
    assert session_user['username'] == 'alice'
    assert session_user['realName'] == 'Alice'
    assert session_user['profilePicture'] == 'imgs/default.png'
    assert client.get('/getUsername').get_json() == {'username': 'alice'}


def test_register_validation(client):
    assert client.post('/register', json={'username': 'bob'}).status_code == 400
    assert register(client, 'bob').status_code == 200
    res = register(client, 'bob')
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Username already exists'


def test_password_is_not_stored_in_clear(flask_app, client):
    register(client, password='hunter2')
    from shaperun.models import Player
    player = Player.query.filter_by(acct_name='alice').first()
    assert player.password_hash != 'hunter2'
    assert player.password_hash.startswith('pbkdf2:sha256')
    assert player.check_password('hunter2')


def test_login_failures(client):
    assert client.post('/login', json={'username': 'alice'}).status_code == 400
    assert login(client).status_code == 404
    register(client)
    res = login(client, password='wrong')
    assert res.status_code == 401
    assert res.get_json()['message'] == 'Invalid password'


def test_logout_clears_session(logged_in_client):
    client = logged_in_client
    assert client.post('/logout').status_code == 200
    assert client.get('/session').status_code == 401
    assert client.get('/getUsername').status_code == 401


def test_protected_routes_require_login(client):
    for path in ('/get-profile', '/update-profile', '/update-stats'):
        res = client.post(path, json={})
        assert res.status_code == 401
        assert res.get_json()['message'] == 'Unauthorized: Please log in'


def test_profile_roundtrip(logged_in_client):
    client = logged_in_client
    profile = client.post('/get-profile').get_json()
    assert profile['username'] == 'alice'
    assert profile['realName'] == 'Alice Liddell'
    assert profile['bio'] == 'Falling.'
    assert profile['stats'] == []

    res = client.post('/update-profile', json={'bio': 'Down the hole', 'picture': 'imgs/rabbit.png'})
    assert res.status_code == 200
    profile = client.post('/get-profile').get_json()
    assert profile['bio'] == 'Down the hole'
    assert profile['profilePicture'] == 'imgs/rabbit.png'
    # session copy is refreshed too
    assert client.get('/session').get_json()['bio'] == 'Down the hole'


def test_update_profile_keeps_unsent_fields(logged_in_client):
    client = logged_in_client
    client.post('/update-profile', json={'picture': 'imgs/cat.png'})
    profile = client.post('/get-profile').get_json()
    assert profile['bio'] == 'Falling.'
    assert profile['profilePicture'] == 'imgs/cat.png'


def test_update_stats_and_leaderboard(flask_app, client):
    register(client, 'alice')
    register(client, 'bob')
    register(client, 'cara')

    login(client, 'alice')
    assert client.post('/update-stats', json={'score': 1200, 'time': 2.0}).status_code == 200
    assert client.post('/update-stats', json={'score': 900, 'time': 1.5}).status_code == 200
    client.post('/logout')

    login(client, 'bob')
    assert client.post('/update-stats', json={'score': 1205, 'time': 1.9}).status_code == 200
    client.post('/logout')

    login(client, 'cara')
    assert client.post('/update-stats', json={'score': 3000, 'time': 5.0}).status_code == 200

    board = client.get('/get-leaderboard').get_json()
    # cara has no tie; alice and bob both floor to 120, bob was faster
    assert [row['username'] for row in board] == ['cara', 'bob', 'alice']
    assert board[0] == {'username': 'cara', 'score': 300, 'time': 5.0}
    assert board[2]['time'] == 2.0

    from shaperun.models import LeaderboardEntry
    assert LeaderboardEntry.query.count() == 4

    stats = client.post('/get-profile').get_json()['stats']
    assert stats == [{'score': 3000.0, 'time': 5.0}]


def test_update_stats_rejects_non_numbers(logged_in_client):
    res = logged_in_client.post('/update-stats', json={'score': 'lots', 'time': 1})
    assert res.status_code == 400
    res = logged_in_client.post('/update-stats', json={'score': 10})
    assert res.status_code == 400


def test_leaderboard_empty(client):
    res = client.get('/get-leaderboard')
    assert res.status_code == 200
    assert res.get_json() == []


def test_leaderboard_skips_players_without_runs(client):
    register(client, 'idle')
    register(client, 'runner')
    login(client, 'runner')
    client.post('/update-stats', json={'score': 55, 'time': 0.3})
    board = client.get('/get-leaderboard').get_json()
    assert board == [{'username': 'runner', 'score': 5, 'time': 0.3}]
