"""
Interactive helper that obtains an OAuth 2.0 user access token for the bookmarks endpoint.

Run this locally once, log in as the account whose bookmarks you want and
accept. The callback is captured by a one-shot local server, the code is
exchanged for tokens and the lines to add to .env are printed.

    python3 -m blogsync.oauth_pkce [CLIENT_ID]
"""
import base64
import hashlib
import secrets
import sys
import urllib.parse
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Dict, Optional, Tuple

import requests

from .config import Config
from .logger import configure_logging, logger

AUTHORIZE_URL = "https://twitter.com/i/oauth2/authorize"
TOKEN_URL = "https://api.twitter.com/2/oauth2/token"
SCOPES = "tweet.read users.read bookmark.read offline.access"


def generate_pkce_pair() -> Tuple[str, str]:
    verifier = base64.urlsafe_b64encode(secrets.token_bytes(32)).rstrip(b"=").decode("utf-8")
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    challenge = base64.urlsafe_b64encode(digest).rstrip(b"=").decode("utf-8")
    return verifier, challenge


def build_authorize_url(client_id: str, redirect_uri: str, state: str, challenge: str) -> str:
    params = {
        "response_type": "code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": SCOPES,
        "state": state,
        "code_challenge": challenge,
        "code_challenge_method": "S256",
    }
    return AUTHORIZE_URL + "?" + urllib.parse.urlencode(params)


def exchange_code(code: str, verifier: str, client_id: str, client_secret: str,
                  redirect_uri: str, session: Optional[requests.Session] = None) -> Dict[str, str]:
    """
    Exchange an authorization code for access and refresh tokens.

    Returns:
        Token response (access_token, refresh_token, expires_in, ...)
    """
    http = session or requests
    response = http.post(
        TOKEN_URL,
        auth=(client_id, client_secret),
        data={
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
            "code_verifier": verifier,
        },
        timeout=30,
    )
    response.raise_for_status()
    return response.json()


class CallbackHandler(BaseHTTPRequestHandler):
    """Answers the OAuth redirect; any other path gets a 404 and the server keeps waiting."""

    def do_GET(self):
        url = urllib.parse.urlparse(self.path)
        if url.path != self.server.expected_path:
            self.send_response(404)
            self.end_headers()
            return
        query = urllib.parse.parse_qs(url.query)
        code = (query.get("code") or [None])[0]
        state = (query.get("state") or [None])[0]
        ok = bool(code) and state == self.server.expected_state
        self.send_response(200 if ok else 400)
        self.send_header("Content-Type", "text/html")
        self.end_headers()
        if ok:
            self.server.result["code"] = code
            self.wfile.write(b"<h1>Authorization successful</h1><p>You can close this window.</p>")
        else:
            self.server.result["error"] = "Invalid state or missing code"
            self.wfile.write(b"<h1>Authorization failed</h1><p>Invalid state or missing code</p>")

    def log_message(self, format, *args):
        logger.debug("callback: " + format, *args)


class CallbackServer(HTTPServer):
    """One-shot server bound to the redirect URI's host and port."""

    def __init__(self, redirect_uri: str, expected_state: str):
        parsed = urllib.parse.urlparse(redirect_uri)
        self.expected_path = parsed.path or "/"
        self.expected_state = expected_state
        self.result: Dict[str, str] = {}
        port = parsed.port if parsed.port is not None else 80
        super().__init__((parsed.hostname or "localhost", port), CallbackHandler)

    def wait(self) -> str:
        """Handle requests until the callback arrives; returns the authorization code."""
        try:
            while not self.result:
                self.handle_request()
        finally:
            self.server_close()
        if "error" in self.result:
            raise RuntimeError(self.result["error"])
        return self.result["code"]


def wait_for_callback(redirect_uri: str, expected_state: str) -> str:
    """Serve the redirect URI until the callback arrives and return the authorization code."""
    server = CallbackServer(redirect_uri, expected_state)
    logger.info("Waiting for callback on %s", redirect_uri)
    return server.wait()


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    config = Config.from_env()
    configure_logging(config.LOG_LEVEL)
    client_id = config.X_CLIENT_ID or (argv[0] if argv else None)
    if not client_id or not config.X_CLIENT_SECRET:
        logger.error("X_CLIENT_ID and X_CLIENT_SECRET are required")
        logger.error("Usage: python3 -m blogsync.oauth_pkce YOUR_CLIENT_ID (with X_CLIENT_SECRET in .env)")
        return 1

    verifier, challenge = generate_pkce_pair()
    state = secrets.token_hex(16)
    url = build_authorize_url(client_id, config.X_REDIRECT_URI, state, challenge)
    print("\nOpen this URL in your browser if it does not open automatically:\n")
    print(url)
    webbrowser.open(url)

    try:
        code = wait_for_callback(config.X_REDIRECT_URI, state)
        tokens = exchange_code(code, verifier, client_id, config.X_CLIENT_SECRET, config.X_REDIRECT_URI)
    except (RuntimeError, requests.RequestException) as e:
        logger.error("Token exchange failed: %s", e)
        return 1

    print("\nAdd these to your .env file:\n")
    print(f"X_OAUTH2_ACCESS_TOKEN={tokens.get('access_token')}")
    print(f"X_OAUTH2_REFRESH_TOKEN={tokens.get('refresh_token')}")
    print(f"\nToken expires in: {tokens.get('expires_in')} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
