from datetime import datetime, timezone

PASSWORD = 'secret123'


def register(client, email, password=PASSWORD, name='Test User'):
    return client.post('/api/auth/register', json={'email': email, 'password': password, 'name': name})


def login(client, email, password=PASSWORD):
    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()['token']


def ms(*args):
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def create(client, path, **payload):
    response = client.post(path, json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()
