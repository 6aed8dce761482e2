"""
Spotify OAuth 2.0 authentication and token management.

Handles the authorization-code + PKCE flow, token refresh, and token storage
under the data directory (0600 permissions).
"""

import base64
import hashlib
import json
import secrets
import threading
import webbrowser
from datetime import datetime, timedelta
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
from urllib.parse import parse_qs, urlencode, urlparse

import requests
from loguru import logger

from camelot_sort.core.config import get_data_dir
from camelot_sort.core.output import log

from ...provider import ProviderConfig, ProviderState

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"

# Reading and reordering playlists only
SPOTIFY_SCOPES = [
    "playlist-read-private",
    "playlist-read-collaborative",
    "playlist-modify-public",
    "playlist-modify-private",
]

CALLBACK_TIMEOUT_SECONDS = 120


def _basic_auth_header(config: ProviderConfig) -> str:
    raw = f"{config.client_id}:{config.client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("utf-8")


def _with_expiry(token_data: Dict[str, Any]) -> Dict[str, Any]:
    """Stamp token data with an absolute expiry time."""
    expires_in = token_data.get("expires_in", 3600)  # Default 1 hour
    expires_at = datetime.now() + timedelta(seconds=expires_in)
    return {**token_data, "expires_at": expires_at.isoformat()}


def _parse_callback(url: str) -> Dict[str, Optional[str]]:
    params = parse_qs(urlparse(url).query)
    return {
        "code": params.get("code", [None])[0],
        "state": params.get("state", [None])[0],
        "error": params.get("error", [None])[0],
    }


def build_authorize_url(
    config: ProviderConfig, code_challenge: str, csrf_state: str
) -> str:
    """Build the Spotify authorization URL for the PKCE flow."""
    params = {
        "client_id": config.client_id,
        "response_type": "code",
        "redirect_uri": config.redirect_uri,
        "code_challenge_method": "S256",
        "code_challenge": code_challenge,
        "state": csrf_state,
        "scope": " ".join(SPOTIFY_SCOPES),
    }
    return f"{AUTHORIZE_URL}?{urlencode(params)}"


def _wait_for_callback(auth_url: str, redirect_uri: str) -> Optional[Dict[str, Optional[str]]]:
    """Serve one request on the redirect URI, or ask for the URL to be pasted.

    Returns:
        Parsed callback params, or None on timeout/cancel
    """
    result: Dict[str, Optional[str]] = {}

    class CallbackHandler(BaseHTTPRequestHandler):
        def do_GET(self):
            result.update(_parse_callback(self.path))
            self.send_response(200)
            self.send_header("Content-type", "text/html")
            self.end_headers()
            if result.get("code"):
                body = "<h1>Authentication successful</h1><p>You can close this window.</p>"
            else:
                body = f"<h1>Authentication failed</h1><p>{result.get('error') or 'Unknown error'}</p>"
            self.wfile.write(f"<html><body>{body}</body></html>".encode())

        def log_message(self, format, *args):
            pass  # Suppress server logs

    server = None
    try:
        port = urlparse(redirect_uri).port or 8080
        server = HTTPServer(("localhost", port), CallbackHandler)
        server_thread = threading.Thread(target=server.handle_request, daemon=True)
        server_thread.start()

        log("🔐 Starting Spotify authentication...", level="info")
        logger.debug(f"Authorization URL: {auth_url}")

        try:
            opened = webbrowser.open(auth_url)
        except webbrowser.Error as e:
            logger.debug(f"Failed to open browser: {e}")
            opened = False

        if not opened:
            log(f"Please open this URL in your browser:\n{auth_url}", level="info")

        log(f"⏳ Waiting for authorization ({CALLBACK_TIMEOUT_SECONDS} seconds timeout)...", level="info")
        server_thread.join(timeout=CALLBACK_TIMEOUT_SECONDS)

    except OSError as e:
        # Port in use or no loopback: manual paste
        logger.warning(f"Callback server error: {e}")
        log(f"⚠ Could not start callback server: {e}", level="warning")
        log(f"1. Open this URL in your browser:\n{auth_url}", level="info")
        log("2. Paste the FULL URL you are redirected to", level="info")
        try:
            callback_url = input("Callback URL: ").strip()
        except (EOFError, KeyboardInterrupt):
            return None
        if callback_url:
            result.update(_parse_callback(callback_url))

    finally:
        if server:
            server.server_close()

    return result or None


def authenticate(state: ProviderState) -> Tuple[ProviderState, bool]:
    """Authenticate with Spotify using OAuth 2.0 + PKCE.

    Opens the browser for authorization and exchanges the code for tokens.
    Falls back to pasting the redirect URL on headless systems.

    Args:
        state: Current provider state

    Returns:
        (new_state, success)
    """
    config = state.config
    if not config.client_id or not config.client_secret:
        log("❌ Spotify credentials not configured", level="error")
        log("Set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET (or [spotify] in config.toml)", level="info")
        return state, False

    pkce = _generate_pkce()
    csrf_state = secrets.token_urlsafe(32)
    auth_url = build_authorize_url(config, pkce["code_challenge"], csrf_state)

    callback = _wait_for_callback(auth_url, config.redirect_uri)

    if not callback:
        log("❌ Authorization timeout - no response received", level="error")
        return state, False

    if callback.get("error"):
        log(f"❌ Authorization error: {callback['error']}", level="error")
        return state, False

    if not callback.get("code"):
        log("❌ No authorization code received", level="error")
        return state, False

    if callback.get("state") != csrf_state:
        log("❌ CSRF state mismatch, please try again", level="error")
        logger.error("CSRF state mismatch in Spotify callback")
        return state, False

    try:
        response = requests.post(
            TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": callback["code"],
                "redirect_uri": config.redirect_uri,
                "code_verifier": pkce["code_verifier"],
            },
            headers={"Authorization": _basic_auth_header(config)},
            timeout=30,
        )
        response.raise_for_status()
        token_data = _with_expiry(response.json())
    except requests.HTTPError as e:
        logger.exception("Token exchange HTTP error")
        log(f"❌ Token exchange failed: {e}", level="error")
        return state, False
    except (requests.RequestException, ValueError) as e:
        logger.exception("Token exchange failed")
        log(f"❌ Authentication error: {e}", level="error")
        return state, False

    save_user_tokens(token_data)
    logger.info(f"Spotify authentication successful, token expires: {token_data['expires_at']}")
    log("✓ Authentication successful!", level="info")

    return state.with_authenticated(True).with_cache(token_data=token_data), True


def _generate_pkce() -> Dict[str, str]:
    """Generate PKCE code verifier and challenge."""
    code_verifier = (
        base64.urlsafe_b64encode(secrets.token_bytes(32)).decode("utf-8").rstrip("=")
    )
    challenge_bytes = hashlib.sha256(code_verifier.encode("utf-8")).digest()
    code_challenge = (
        base64.urlsafe_b64encode(challenge_bytes).decode("utf-8").rstrip("=")
    )

    return {"code_verifier": code_verifier, "code_challenge": code_challenge}


def get_tokens_file() -> Path:
    """Path of the stored user tokens."""
    return get_data_dir() / "spotify" / "user_tokens.json"


def load_user_tokens() -> Optional[Dict[str, Any]]:
    """Load user OAuth tokens from file."""
    tokens_file = get_tokens_file()
    if not tokens_file.exists():
        return None

    try:
        with open(tokens_file, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load Spotify tokens from file: {e}")
        return None


def save_user_tokens(token_data: Dict[str, Any]) -> None:
    """Save user OAuth tokens to file with owner-only permissions."""
    tokens_file = get_tokens_file()
    tokens_file.parent.mkdir(parents=True, exist_ok=True)

    with open(tokens_file, "w", encoding="utf-8") as f:
        json.dump(token_data, f, indent=2)

    tokens_file.chmod(0o600)
    logger.debug(f"Saved Spotify tokens to {tokens_file}")


def is_token_expired(token_data: Dict[str, Any]) -> bool:
    """Check if token is expired (with 5-minute buffer)."""
    if "expires_at" not in token_data:
        return True

    try:
        expires_at = datetime.fromisoformat(token_data["expires_at"])
    except (TypeError, ValueError):
        return True

    return datetime.now() >= (expires_at - timedelta(minutes=5))


def refresh_token(
    config: ProviderConfig, token_data: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Refresh an expired OAuth token.

    Args:
        config: Provider config with client credentials
        token_data: Current token data with refresh_token

    Returns:
        New token data or None if refresh fails
    """
    refresh_token_value = token_data.get("refresh_token")
    if not config.client_id or not config.client_secret or not refresh_token_value:
        logger.warning("Missing credentials or refresh token for Spotify token refresh")
        return None

    try:
        response = requests.post(
            TOKEN_URL,
            data={"grant_type": "refresh_token", "refresh_token": refresh_token_value},
            headers={"Authorization": _basic_auth_header(config)},
            timeout=30,
        )
        response.raise_for_status()
        new_token_data = _with_expiry(response.json())
    except requests.HTTPError as e:
        logger.warning(f"Failed to refresh Spotify token: {e}")
        return None
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Failed to refresh Spotify token: {e}")
        return None

    # Spotify may omit the refresh token on refresh
    new_token_data.setdefault("refresh_token", refresh_token_value)

    save_user_tokens(new_token_data)
    logger.info(f"Spotify token refreshed, expires: {new_token_data['expires_at']}")
    return new_token_data
