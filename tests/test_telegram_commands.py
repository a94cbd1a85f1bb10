import pytest

from utils.telegram_commands import parse_bot_command


def test_parse_command_without_args():
    assert parse_bot_command("/forex") == ("forex", "")


def test_parse_command_keeps_raw_args():
    cmd, args = parse_bot_command("/convert  USD 50,000 ; IDR ; 2022-02-02  ")
    assert cmd == "convert"
    assert args == "USD 50,000 ; IDR ; 2022-02-02"


def test_parse_command_lowercases_command_word():
    cmd, args = parse_bot_command("/FOREX usd/idr")
    assert cmd == "forex"
    assert args == "usd/idr"


def test_parse_command_with_matching_mention():
    assert parse_bot_command("/forex@KartelBot IDR", "kartelbot") == ("forex", "IDR")
    assert parse_bot_command("/forex@KartelBot IDR", "@kartelbot") == ("forex", "IDR")


def test_parse_command_mention_ignored_without_username():
    assert parse_bot_command("/help@somebot") == ("help", "")


def test_parse_rejects_other_bot():
    with pytest.raises(ValueError):
        parse_bot_command("/forex@otherbot IDR", "kartelbot")


def test_parse_rejects_plain_text():
    with pytest.raises(ValueError):
        parse_bot_command("hello there")


def test_parse_rejects_empty():
    with pytest.raises(ValueError):
        parse_bot_command("")
    with pytest.raises(ValueError):
        parse_bot_command("/")
