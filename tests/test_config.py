import json

import pytest

from kartel.config import DEFAULTS, BotConfig
from kartel.exceptions import ConfigurationError
from kartel.queries import ForexDefaults


def test_defaults_without_file():
    cfg = BotConfig(environ={})
    assert cfg.mode == 'polling'
    assert cfg.bot_token == ''
    assert cfg.get('webhook.port') == 8080
    assert cfg.get('forex.default_base') == 'USD'
    assert cfg.get('missing.key', 'fallback') == 'fallback'
    assert cfg.forex_defaults() == ForexDefaults()


def test_file_values_win_and_defaults_fill_gaps(tmp_path):
    path = tmp_path / 'kartel.json'
    path.write_text(json.dumps({'bot': {'mode': 'webhook'}, 'webhook': {'port': 9000}}), encoding='utf-8')
    cfg = BotConfig(path, environ={})
    assert cfg.mode == 'webhook'
    assert cfg.get('webhook.port') == 9000
    assert cfg.get('webhook.url') == DEFAULTS['webhook']['url']
    assert cfg.get('bot.poll_timeout_sec') == 25


def test_defaults_are_not_shared_between_instances():
    a = BotConfig(environ={})
    a.set('forex.default_batch', [])
    assert len(BotConfig(environ={}).get('forex.default_batch')) == 6


def test_environment_overrides_file(tmp_path):
    path = tmp_path / 'kartel.json'
    path.write_text(json.dumps({'bot': {'token': 'from-file'}}), encoding='utf-8')
    env = {
        'KARTEL_BOT_TOKEN': 'from-env',
        'KARTEL_WEBHOOK_PORT': '8443',
        'KARTEL_ALLOWED_CHAT_IDS': '1, 2,,3',
        'KARTEL_LOG_LEVEL': '',
    }
    cfg = BotConfig(path, environ=env)
    assert cfg.bot_token == 'from-env'
    assert cfg.get('webhook.port') == 8443
    assert cfg.allowed_chat_ids == ['1', '2', '3']
    assert cfg.get('logging.level') == 'INFO'


def test_bad_environment_value():
    with pytest.raises(ConfigurationError):
        BotConfig(environ={'KARTEL_WEBHOOK_PORT': 'eighty'})


def test_missing_or_broken_file(tmp_path):
    with pytest.raises(ConfigurationError):
        BotConfig(tmp_path / 'nope.json', environ={})
    broken = tmp_path / 'broken.json'
    broken.write_text('{not json', encoding='utf-8')
    with pytest.raises(ConfigurationError):
        BotConfig(broken, environ={})
    listed = tmp_path / 'list.json'
    listed.write_text('[]', encoding='utf-8')
    with pytest.raises(ConfigurationError):
        BotConfig(listed, environ={})


def test_set_and_get_dotted_keys():
    cfg = BotConfig(environ={})
    cfg.set('a.b.c', 1)
    assert cfg.get('a.b.c') == 1
    assert cfg.get('a.b') == {'c': 1}
    with pytest.raises(ValueError):
        cfg.set('', 1)


def test_validate_config():
    cfg = BotConfig(environ={})
    with pytest.raises(ConfigurationError) as exc:
        cfg.validate_config()
    assert 'KARTEL_BOT_TOKEN' in exc.value.user_message
    cfg.validate_config(require_token=False)

    cfg.set('bot.token', 'T')
    cfg.validate_config()
    cfg.set('bot.mode', 'carrier-pigeon')
    with pytest.raises(ConfigurationError):
        cfg.validate_config()

    cfg.set('bot.mode', 'webhook')
    cfg.set('webhook.url', '')
    with pytest.raises(ConfigurationError):
        cfg.validate_config()

    cfg.set('webhook.url', 'https://example.com/webhook')
    cfg.set('forex.default_batch', [['USD 1']])
    with pytest.raises(ConfigurationError):
        cfg.validate_config()


def test_forex_defaults_from_file(tmp_path):
    path = tmp_path / 'kartel.json'
    path.write_text(
        json.dumps({'forex': {'default_base': 'IDR', 'default_batch': [['EUR 2', 'JPY']]}}),
        encoding='utf-8',
    )
    d = BotConfig(path, environ={}).forex_defaults()
    assert d.base == 'IDR'
    assert d.batch == (('EUR 2', 'JPY'),)
    assert d.conversion == ('USD 1', 'IDR')


@pytest.mark.parametrize('conversion', [[], ['USD 1'], 'USD 1 IDR', None])
def test_validate_rejects_malformed_default_conversion(conversion):
    cfg = BotConfig(environ={'KARTEL_BOT_TOKEN': 'T'})
    cfg.set('forex.default_conversion', conversion)
    with pytest.raises(ConfigurationError):
        cfg.validate_config()
