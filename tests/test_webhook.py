from fastapi.testclient import TestClient

from kartel.webhook import create_app


class FakeBot:
    def __init__(self, explode=False):
        self.updates = []
        self.explode = explode

    def handle_update(self, update):
        self.updates.append(update)
        if self.explode:
            raise RuntimeError("handler blew up")
        return True


UPDATE = {'update_id': 5, 'message': {'message_id': 1, 'chat': {'id': 42}, 'text': '/help'}}


def test_ping():
    client = TestClient(create_app(FakeBot()))
    resp = client.get('/ping')
    assert resp.status_code == 200
    assert resp.text == 'pong'


def test_webhook_hands_update_to_bot():
    bot = FakeBot()
    client = TestClient(create_app(bot))
    resp = client.post('/webhook', json=UPDATE)
    assert resp.status_code == 200
    assert resp.json() == {'ok': True}
    assert bot.updates == [UPDATE]


def test_webhook_rejects_wrong_secret():
    bot = FakeBot()
    client = TestClient(create_app(bot, secret_token='s3cret'))
    assert client.post('/webhook', json=UPDATE).status_code == 403
    resp = client.post(
        '/webhook', json=UPDATE, headers={'X-Telegram-Bot-Api-Secret-Token': 'nope'}
    )
    assert resp.status_code == 403
    assert bot.updates == []

    resp = client.post(
        '/webhook', json=UPDATE, headers={'X-Telegram-Bot-Api-Secret-Token': 's3cret'}
    )
    assert resp.status_code == 200
    assert len(bot.updates) == 1


def test_webhook_acknowledges_even_when_handler_fails():
    client = TestClient(create_app(FakeBot(explode=True)))
    resp = client.post('/webhook', json=UPDATE)
    assert resp.status_code == 200
    assert resp.json() == {'ok': True}
