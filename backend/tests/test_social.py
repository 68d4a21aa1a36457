from conftest import register, login


def test_anonymous_comment(client):
    res = client.post('/postComment', json={'comment': 'first!'})
    assert res.status_code == 201
    comments = client.get('/getComments').get_json()
    assert len(comments) == 1
    assert comments[0]['username'] == 'Anonymous'
    assert comments[0]['realName'] == 'Anonymous'
    assert comments[0]['likes'] == 0
    assert comments[0]['replies'] == []


def test_comment_requires_text(client):
    assert client.post('/postComment', json={}).status_code == 400
    assert client.post('/postComment', json={'comment': '   '}).status_code == 400


def test_comment_uses_session_identity(logged_in_client):
    logged_in_client.post('/postComment', json={'comment': 'hello'})
    comment = logged_in_client.get('/getComments').get_json()[0]
    assert comment['username'] == 'alice'
    assert comment['realName'] == 'Alice Liddell'


def test_get_comments_empty(client):
    res = client.get('/getComments')
    assert res.status_code == 200
    assert res.get_json() == []


def test_reply_flow(logged_in_client):
    client = logged_in_client
    comment_id = client.post('/postComment', json={'comment': 'thread'}).get_json()['comment']['id']

    res = client.post('/postReply', json={'commentId': comment_id, 'text': 'a reply'})
    assert res.status_code == 200
    assert res.get_json()['reply'] == {'username': 'alice', 'realName': 'Alice Liddell', 'text': 'a reply'}

    replies = client.get('/getComments').get_json()[0]['replies']
    assert [r['text'] for r in replies] == ['a reply']
    assert replies[0]['likes'] == 0

    assert client.post('/postReply', json={'commentId': comment_id}).status_code == 400
    assert client.post('/postReply', json={'commentId': 9999, 'text': 'x'}).status_code == 404


def test_like_once_per_user(client):
    comment_id = client.post('/postComment', json={'comment': 'like me'}).get_json()['comment']['id']

    # logged out users cannot like
    assert client.post('/likeComment', json={'id': comment_id}).status_code == 401

    register(client)
    login(client)
    res = client.post('/likeComment', json={'id': comment_id})
    assert res.status_code == 200
    assert res.get_json() == {'success': True, 'likes': 1}

    res = client.post('/likeComment', json={'id': comment_id})
    assert res.status_code == 400

    assert client.post('/likeComment', json={'id': 4242}).status_code == 404
    comment = client.get('/getComments').get_json()[0]
    assert comment['likedBy'] == ['alice']


def test_sort_comments(client):
    ids = [client.post('/postComment', json={'comment': f'c{i}'}).get_json()['comment']['id'] for i in range(3)]

    newest = client.get('/getComments?sort=newest').get_json()
    assert [c['id'] for c in newest] == list(reversed(ids))

    register(client, 'alice')
    register(client, 'bob')
    login(client, 'alice')
    client.post('/likeComment', json={'id': ids[0]})
    client.post('/likeComment', json={'id': ids[1]})
    client.post('/logout')
    login(client, 'bob')
    client.post('/likeComment', json={'id': ids[0]})

    liked = client.get('/getComments?sort=likes').get_json()
    assert [c['id'] for c in liked] == [ids[0], ids[1], ids[2]]
    assert [c['likes'] for c in liked] == [2, 1, 0]


def test_pages_are_served(client):
    assert client.get('/').status_code == 200
    for page in ('/game', '/social', '/profile', '/game.html'):
        assert client.get(page).status_code == 200
    assert client.get('/imgs/env0.png').status_code == 200
