from urllib.parse import parse_qs, urlsplit

import pytest

from board import GameStatus
from share import (
    COMPOSE_URL,
    clipboard_text,
    compose_url,
    format_share_text,
    manual_share_text,
    result_headline,
)
from stats import Stats


def test_share_text_for_a_win():
    text = format_share_text(GameStatus.PLAYER_WINS, Stats(3, 1, 0, 4))
    assert text == (
        "🎉 Just crushed the AI in Tic-Tac-Toe!\n"
        "\n"
        "📊 My Battle Stats:\n"
        "🏆 Wins: 3\n"
        "🤖 AI Wins: 1\n"
        "⚖️ Draws: 0\n"
        "📈 Win Rate: 75%\n"
        "🎮 Total Games: 4\n"
        "\n"
        "🎯 Think you can beat the AI? Challenge it here!"
    )


def test_headlines_differ_per_outcome():
    assert "AI got me" in result_headline(GameStatus.OPPONENT_WINS)
    assert "draw" in result_headline(GameStatus.DRAW)


def test_nothing_to_share_mid_game():
    with pytest.raises(ValueError):
        format_share_text(GameStatus.IN_PROGRESS, Stats())


def test_compose_url_carries_text_and_embed():
    url = compose_url("Good game & more", "https://ttt.example")
    parts = urlsplit(url)
    assert url.startswith(COMPOSE_URL + "?")
    query = parse_qs(parts.query)
    assert query["text"] == ["Good game & more"]
    assert query["embeds[]"] == ["https://ttt.example"]


def test_fallback_texts_include_game_link():
    assert clipboard_text("gg", "https://ttt.example") == "gg\n\nGame: https://ttt.example"
    manual = manual_share_text("gg", "https://ttt.example")
    assert manual.startswith("❌ Copy this text to share on Warpcast:")
    assert manual.endswith("gg\n\nGame: https://ttt.example")
