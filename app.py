import logging
import os
import secrets
from pathlib import Path

from flask import Flask, Response, abort, jsonify, redirect, request, url_for

import artwork
import miniapp
from tictactoe import tictactoe_bp

app = Flask(__name__)

# --- Configuration ---
SECRET_KEY_FILE = Path(__file__).parent / ".secret_key"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def _load_secret_key() -> str:
    """Use SECRET_KEY if set, otherwise persist one so sessions survive restarts."""
    key = os.environ.get("SECRET_KEY")
    if key:
        return key
    if SECRET_KEY_FILE.exists():
        return SECRET_KEY_FILE.read_text()
    key = secrets.token_hex(32)
    SECRET_KEY_FILE.write_text(key)
    return key


app.secret_key = _load_secret_key()

# Mini-app hosts load the page in a cross-site iframe; the stats cookie
# only survives there as SameSite=None, which requires https.
_secure = miniapp.ROOT_URL.startswith("https://")
app.config.update(
    SESSION_COOKIE_SECURE=_secure,
    SESSION_COOKIE_SAMESITE="None" if _secure else "Lax",
)
app.json.ensure_ascii = False


# --- Mini-app routes ---
@app.route("/.well-known/farcaster.json")
def farcaster_manifest():
    return jsonify(miniapp.manifest())


@app.route("/api/webhook", methods=["POST"])
def webhook():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    app.logger.info("Mini-app event: %s", body.get("event", "unknown"))
    return jsonify({"success": True})


@app.route("/<name>.png")
def artwork_image(name):
    filename = f"{name}.png"
    if filename not in artwork.SIZES:
        abort(404)
    response = Response(artwork.render(filename), mimetype="image/png")
    response.cache_control.public = True
    response.cache_control.max_age = 86400
    return response


@app.route("/")
def landing():
    return redirect(url_for("tictactoe.tictactoe"))


app.register_blueprint(tictactoe_bp)

if __name__ == "__main__":
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cert = Path(__file__).parent / "cert.pem"
    key = Path(__file__).parent / "key.pem"
    ssl_ctx = (cert, key) if cert.exists() and key.exists() else None
    app.run(
        debug=os.environ.get("FLASK_DEBUG") == "1",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 5050)),
        ssl_context=ssl_ctx,
    )
