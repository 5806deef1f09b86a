"""Tests for the OAuth 2.0 PKCE token helper."""
import base64
import hashlib
import threading
from urllib.parse import parse_qs, urlparse

import requests

from conftest import FakeSession, make_response
from blogsync.oauth_pkce import (
    TOKEN_URL,
    CallbackServer,
    build_authorize_url,
    exchange_code,
    generate_pkce_pair,
)


def test_pkce_pair_is_s256():
    """The challenge is the unpadded base64url SHA-256 of the verifier."""
    verifier, challenge = generate_pkce_pair()
    expected = base64.urlsafe_b64encode(hashlib.sha256(verifier.encode()).digest()).rstrip(b"=").decode()
    assert challenge == expected
    assert len(verifier) == 43
    assert "=" not in verifier


def test_authorize_url():
    """The authorize URL carries client, redirect, scopes, state and challenge."""
    url = build_authorize_url("client-1", "http://localhost:5173/callback", "state-1", "challenge-1")
    parsed = urlparse(url)
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
    assert parsed.netloc == "twitter.com"
    assert query["client_id"] == "client-1"
    assert query["redirect_uri"] == "http://localhost:5173/callback"
    assert query["scope"] == "tweet.read users.read bookmark.read offline.access"
    assert query["code_challenge_method"] == "S256"
    assert query["state"] == "state-1"


def test_exchange_code_posts_form_with_basic_auth():
    """Code exchange sends the verifier and authenticates the client."""
    tokens = {"access_token": "at", "refresh_token": "rt", "expires_in": 7200}
    session = FakeSession(make_response(200, tokens))

    result = exchange_code("code-1", "verifier-1", "cid", "csecret", "http://localhost:5173/callback", session=session)

    assert result == tokens
    call = session.calls[0]
    assert call["url"] == TOKEN_URL
    assert call["auth"] == ("cid", "csecret")
    assert call["data"]["grant_type"] == "authorization_code"
    assert call["data"]["code_verifier"] == "verifier-1"


def serve_in_thread(server):
    outcome = {}

    def target():
        try:
            outcome["code"] = server.wait()
        except RuntimeError as e:
            outcome["error"] = str(e)

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    return thread, outcome


def test_callback_ignores_other_paths_then_returns_code():
    """Requests for other paths get a 404 and the server keeps waiting for the callback."""
    server = CallbackServer("http://127.0.0.1:0/callback", "state-1")
    base = f"http://127.0.0.1:{server.server_address[1]}"
    thread, outcome = serve_in_thread(server)

    assert requests.get(base + "/favicon.ico", timeout=5).status_code == 404
    assert thread.is_alive()

    response = requests.get(base + "/callback", params={"code": "abc", "state": "state-1"}, timeout=5)
    thread.join(5)

    assert response.status_code == 200
    assert not thread.is_alive()
    assert outcome == {"code": "abc"}


def test_callback_rejects_state_mismatch():
    """A callback carrying the wrong state fails instead of returning the code."""
    server = CallbackServer("http://127.0.0.1:0/callback", "state-1")
    base = f"http://127.0.0.1:{server.server_address[1]}"
    thread, outcome = serve_in_thread(server)

    response = requests.get(base + "/callback", params={"code": "abc", "state": "forged"}, timeout=5)
    thread.join(5)

    assert response.status_code == 400
    assert not thread.is_alive()
    assert outcome == {"error": "Invalid state or missing code"}
