"""Share-a-result text for the social feed."""

from urllib.parse import urlencode

from board import GameStatus
from stats import Stats

COMPOSE_URL = "https://warpcast.com/~/compose"

HEADLINES = {
    GameStatus.PLAYER_WINS: "🎉 Just crushed the AI in Tic-Tac-Toe!",
    GameStatus.OPPONENT_WINS: "🤖 The AI got me this time in Tic-Tac-Toe, but I'll be back!",
    GameStatus.DRAW: "⚖️ Fought to a draw with the AI in Tic-Tac-Toe!",
}

CHALLENGE = "🎯 Think you can beat the AI? Challenge it here!"


def result_headline(status: GameStatus) -> str:
    try:
        return HEADLINES[status]
    except KeyError:
        raise ValueError(f"No result to share while the game is {status.value}") from None


def format_share_text(status: GameStatus, stats: Stats) -> str:
    lines = [
        result_headline(status),
        "",
        "📊 My Battle Stats:",
        f"🏆 Wins: {stats.player_wins}",
        f"🤖 AI Wins: {stats.computer_wins}",
        f"⚖️ Draws: {stats.draws}",
        f"📈 Win Rate: {stats.win_rate}%",
        f"🎮 Total Games: {stats.games_played}",
        "",
        CHALLENGE,
    ]
    return "\n".join(lines)


def compose_url(text: str, embed_url: str) -> str:
    return f"{COMPOSE_URL}?{urlencode({'text': text, 'embeds[]': embed_url})}"


def clipboard_text(text: str, origin: str) -> str:
    return f"{text}\n\nGame: {origin}"


def manual_share_text(text: str, origin: str) -> str:
    return f"❌ Copy this text to share on Warpcast:\n\n{clipboard_text(text, origin)}"
