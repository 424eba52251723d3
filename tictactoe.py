import os
from typing import Optional

from flask import Blueprint, current_app, jsonify, render_template_string, request, session

import miniapp
from board import InvalidMove
from game import GameSession
from opponent import PreconditionViolated
from share import clipboard_text, compose_url, format_share_text, manual_share_text
from stats import StatsStore

tictactoe_bp = Blueprint("tictactoe", __name__, url_prefix="/tictactoe")

# --- Configuration ---
GAME_KEY = "tic-tac-toe-game"
OPPONENT_DELAY_MS = int(os.environ.get("OPPONENT_DELAY_MS", 500))


class SessionStore:
    """Key-value view of the signed session cookie."""

    def get(self, key: str) -> Optional[str]:
        return session.get(key)

    def set(self, key: str, value: str) -> None:
        session[key] = value


def _get_origin():
    """Derive the public origin from the request."""
    scheme = request.headers.get("X-Forwarded-Proto", request.scheme)
    return f"{scheme}://{request.host}"


def _load_game():
    stats = StatsStore(SessionStore())
    game = GameSession.restore(session.get(GAME_KEY))
    game.on_complete(stats.record)
    return game, stats


def _state_response(game: GameSession, stats: StatsStore):
    session[GAME_KEY] = game.to_dict()
    return jsonify({**game.snapshot.to_json(), "stats": stats.load().to_dict()})


@tictactoe_bp.errorhandler(InvalidMove)
def invalid_move(e):
    current_app.logger.info("Rejected move: %s", e)
    return jsonify({"error": str(e)}), 400


@tictactoe_bp.errorhandler(PreconditionViolated)
def precondition_violated(e):
    current_app.logger.warning("Opponent move refused: %s", e)
    return jsonify({"error": str(e)}), 409


TICTACTOE_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ name }}</title>
<meta name="description" content="{{ description }}">
<meta name="fc:miniapp" content='{{ embed | tojson }}'>
<style>
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
    background: #1a1a2e; color: #ecebf5;
    min-height: 100vh; display: flex;
    align-items: center; justify-content: center;
  }
  .container { max-width: 400px; width: 90%; text-align: center; }
  h1 { font-size: 1.8em; font-weight: 600; margin-bottom: 6px; }
  .subtitle { font-size: 0.92em; color: #a3a1c2; margin-bottom: 20px; }
  .status {
    font-size: 1em; color: #a3a1c2; margin-bottom: 20px;
    min-height: 1.4em; transition: color 0.2s;
  }
  .status.win { color: #6fcf97; font-weight: 600; }
  .status.lose { color: #ff6b81; font-weight: 600; }
  .status.draw { color: #f2c94c; font-weight: 600; }
  .scores { display: flex; justify-content: center; gap: 14px; margin-bottom: 20px; }
  .stat {
    flex: 1; padding: 10px 6px;
    background: #23233d; border: 1px solid #34345a; border-radius: 12px;
  }
  .stat-value { display: block; font-size: 1.4em; font-weight: 600; }
  .stat-label { display: block; font-size: 0.78em; color: #a3a1c2; margin-top: 2px; }
  .board {
    display: grid; grid-template-columns: repeat(3, 1fr);
    gap: 8px; margin: 0 auto 24px; max-width: 300px;
  }
  .cell {
    aspect-ratio: 1; background: #23233d;
    border: 1px solid #34345a; border-radius: 12px;
    font-family: inherit; font-size: 2.4em; font-weight: 600;
    cursor: pointer; color: #ecebf5;
    transition: all 0.15s;
  }
  .cell:hover:enabled { border-color: #7c7cff; transform: translateY(-2px); }
  .cell:disabled { cursor: default; }
  .cell.o { color: #ff9f43; }
  .cell.winner { background: #2d4a3a; border-color: #6fcf97; }
  .btn-row { display: flex; gap: 10px; justify-content: center; }
  .btn {
    font-family: inherit; font-weight: 500; font-size: 0.88em;
    padding: 10px 28px; border: 1px solid #34345a;
    border-radius: 10px; cursor: pointer;
    color: #ecebf5; background: #23233d;
    transition: all 0.2s;
  }
  .btn:hover { border-color: #7c7cff; }
  .btn.share { background: #7c7cff; border-color: #7c7cff; }
  .hidden { display: none; }
  .notice {
    margin-top: 18px; font-size: 0.85em; color: #a3a1c2;
    white-space: pre-wrap; text-align: left;
  }
</style>
</head>
<body>
<div class="container">
  <h1>{{ name }}</h1>
  <p class="subtitle" id="subtitle">Loading game...</p>
  <div id="game" class="hidden">
    <div class="scores">
      <div class="stat"><span class="stat-value" id="wins">0</span><span class="stat-label">Your Wins</span></div>
      <div class="stat"><span class="stat-value" id="losses">0</span><span class="stat-label">Computer Wins</span></div>
      <div class="stat"><span class="stat-value" id="draws">0</span><span class="stat-label">Draws</span></div>
    </div>
    <div class="status" id="status"></div>
    <div class="board" id="board"></div>
    <div class="btn-row">
      <button class="btn" onclick="newGame()">New Game</button>
      <button class="btn share hidden" id="shareBtn" onclick="shareResult()">Share Result</button>
    </div>
    <p class="notice" id="notice"></p>
  </div>
</div>
<script type="module">
const API = "{{ url_for('tictactoe.tictactoe') }}api";
const OPPONENT_DELAY_MS = {{ opponent_delay_ms }};
const MESSAGES = {
  'player-wins': ['🎉 You won!', 'win'],
  'computer-wins': ['🤖 Computer wins!', 'lose'],
  'draw': ["⚖️ It's a draw!", 'draw'],
};

let state = null, busy = false, opponentTimer = null, sdk = null;
// Bumped on New Game; responses from an older game are dropped.
let generation = 0, inflight = Promise.resolve();

async function call(path, method, body) {
  const res = await fetch(API + path, {
    method: method || 'GET',
    headers: { 'Content-Type': 'application/json' },
    body,
  });
  const data = await res.json();
  if (!res.ok) throw new Error(data.error || 'Request failed');
  return data;
}

function track(promise) {
  inflight = promise.catch(() => {});
  return promise;
}

function render(next) {
  state = next;
  const cells = document.querySelectorAll('.cell');
  const over = state.status !== 'playing';
  cells.forEach((cell, i) => {
    cell.textContent = state.board[i] || '';
    cell.classList.toggle('o', state.board[i] === 'O');
    cell.classList.toggle('winner', !!state.line && state.line.includes(i));
    cell.disabled = busy || over || state.turn !== 'player' || !!state.board[i];
  });
  document.getElementById('wins').textContent = state.stats.playerWins;
  document.getElementById('losses').textContent = state.stats.computerWins;
  document.getElementById('draws').textContent = state.stats.draws;
  const status = document.getElementById('status');
  const [msg, cls] = MESSAGES[state.status] ||
    [state.turn === 'player' ? 'Your turn (X)' : 'Computer thinking... (O)', ''];
  status.textContent = msg;
  status.className = 'status' + (cls ? ' ' + cls : '');
  document.getElementById('shareBtn').classList.toggle('hidden', !over);
}

function notice(msg) { document.getElementById('notice').textContent = msg; }

async function playerMove(i) {
  if (busy || !state || state.turn !== 'player' || state.status !== 'playing') return;
  const gen = generation;
  busy = true;
  try {
    const next = await track(call('/move', 'POST', JSON.stringify({ index: i })));
    if (gen !== generation) return;
    render(next);
    if (state.status === 'playing' && state.turn === 'opponent') {
      opponentTimer = setTimeout(opponentMove, OPPONENT_DELAY_MS);
      return;
    }
  } catch (err) {
    if (gen !== generation) return;
    console.error(err);
  }
  busy = false;
  render(state);
}

async function opponentMove() {
  const gen = generation;
  opponentTimer = null;
  try {
    const next = await track(call('/opponent', 'POST'));
    if (gen !== generation) return;
    render(next);
  } catch (err) {
    if (gen !== generation) return;
    console.error(err);
  }
  busy = false;
  render(state);
}

async function newGame() {
  generation++;
  if (opponentTimer) { clearTimeout(opponentTimer); opponentTimer = null; }
  // Let a move already on the wire land first so its cookie is overwritten.
  await inflight;
  busy = false;
  notice('');
  render(await call('/reset', 'POST'));
}

async function shareResult() {
  notice('');
  let share;
  try {
    share = await call('/share');
  } catch (err) {
    notice(err.message);
    return;
  }
  try {
    if (sdk && sdk.actions && sdk.actions.openUrl) {
      await sdk.actions.openUrl(share.composeUrl);
    } else {
      const popup = window.open(share.composeUrl, '_blank');
      if (!popup) {
        throw new Error('Popup blocked - please allow popups for this site');
      }
      popup.opener = null;
    }
  } catch (err) {
    console.error('Failed to share cast:', err);
    try {
      await navigator.clipboard.writeText(share.clipboardText);
      notice('📋 Cast text copied to clipboard! Open Warpcast to paste and share your result.');
    } catch (clipboardErr) {
      console.error('Clipboard failed:', clipboardErr);
      notice(share.manualText);
    }
  }
}

async function ready() {
  try {
    sdk = (await import('https://esm.sh/@farcaster/miniapp-sdk')).sdk;
    await sdk.actions.ready();
  } catch (err) {
    // Not running inside a mini-app host.
    console.error('Failed to initialize MiniApp:', err);
  }
  const board = document.getElementById('board');
  for (let i = 0; i < 9; i++) {
    const cell = document.createElement('button');
    cell.className = 'cell';
    cell.addEventListener('click', () => playerMove(i));
    board.appendChild(cell);
  }
  render(await call('/state'));
  if (state.status === 'playing' && state.turn === 'opponent') {
    busy = true;
    opponentTimer = setTimeout(opponentMove, OPPONENT_DELAY_MS);
  }
  document.getElementById('subtitle').textContent = 'Challenge the AI and share your victories!';
  document.getElementById('game').classList.remove('hidden');
}

window.newGame = newGame;
window.shareResult = shareResult;
ready();
</script>
</body>
</html>
"""


@tictactoe_bp.route("/")
def tictactoe():
    return render_template_string(
        TICTACTOE_TEMPLATE,
        name=miniapp.NAME,
        description=miniapp.DESCRIPTION,
        embed=miniapp.embed(),
        opponent_delay_ms=OPPONENT_DELAY_MS,
    )


# --- API ---
@tictactoe_bp.route("/api/state")
def state():
    game, stats = _load_game()
    return _state_response(game, stats)


@tictactoe_bp.route("/api/move", methods=["POST"])
def move():
    body = request.get_json(silent=True)
    index = body.get("index") if isinstance(body, dict) else None
    game, stats = _load_game()
    game.play(index)
    return _state_response(game, stats)


@tictactoe_bp.route("/api/opponent", methods=["POST"])
def opponent():
    game, stats = _load_game()
    game.respond()
    return _state_response(game, stats)


@tictactoe_bp.route("/api/reset", methods=["POST"])
def reset():
    game, stats = _load_game()
    game.reset()
    return _state_response(game, stats)


@tictactoe_bp.route("/api/share")
def share():
    game, stats = _load_game()
    if not game.status.is_terminal:
        return jsonify({"error": "Finish the game before sharing"}), 409
    origin = _get_origin()
    text = format_share_text(game.status, stats.load())
    current_app.logger.info("Share requested for %s", game.status.value)
    return jsonify({
        "text": text,
        "composeUrl": compose_url(text, origin),
        "clipboardText": clipboard_text(text, origin),
        "manualText": manual_share_text(text, origin),
    })
