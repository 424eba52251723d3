"""
Mini-app metadata: the manifest served at /.well-known/farcaster.json and
the launch embed placed in the page head.
"""

import os


def resolve_root_url() -> str:
    url = os.environ.get("PUBLIC_URL")
    if url:
        return url.rstrip("/")
    vercel_host = os.environ.get("VERCEL_PROJECT_PRODUCTION_URL")
    if vercel_host:
        return f"https://{vercel_host}"
    return f"http://localhost:{os.environ.get('PORT', 5050)}"


ROOT_URL = resolve_root_url()

NAME = "Tic-Tac-Toe Master"
SUBTITLE = "Challenge the Computer"
DESCRIPTION = "Play tic-tac-toe against a smart AI opponent and share your victories!"
TAGLINE = "Beat the AI, Share Your Victory!"
SPLASH_BACKGROUND = "#1a1a2e"
TAGS = ["game", "tic-tac-toe", "ai", "strategy", "competitive"]


def manifest(root_url: str = ROOT_URL) -> dict:
    return {
        "accountAssociation": {
            "header": os.environ.get("FARCASTER_HEADER", ""),
            "payload": os.environ.get("FARCASTER_PAYLOAD", ""),
            "signature": os.environ.get("FARCASTER_SIGNATURE", ""),
        },
        "miniapp": {
            "version": "1",
            "name": NAME,
            "subtitle": SUBTITLE,
            "description": DESCRIPTION,
            "screenshotUrls": [f"{root_url}/screenshot-portrait.png"],
            "iconUrl": f"{root_url}/blue-icon.png",
            "splashImageUrl": f"{root_url}/blue-hero.png",
            "splashBackgroundColor": SPLASH_BACKGROUND,
            "homeUrl": root_url,
            "webhookUrl": f"{root_url}/api/webhook",
            "primaryCategory": "social",
            "tags": TAGS,
            "heroImageUrl": f"{root_url}/blue-hero.png",
            "tagline": TAGLINE,
            "ogTitle": f"{NAME} - {SUBTITLE}",
            "ogDescription": "Play strategic tic-tac-toe against a smart AI and share your winning streaks with friends!",
            "ogImageUrl": f"{root_url}/blue-hero.png",
        },
    }


def embed(root_url: str = ROOT_URL) -> dict:
    """Launch card shown when the app URL is posted in a feed."""
    return {
        "version": "1",
        "imageUrl": f"{root_url}/blue-hero.png",
        "button": {
            "title": "Play Tic-Tac-Toe",
            "action": {
                "type": "launch_miniapp",
                "name": NAME,
                "url": root_url,
                "splashImageUrl": f"{root_url}/blue-hero.png",
                "splashBackgroundColor": SPLASH_BACKGROUND,
            },
        },
    }
