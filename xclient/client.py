"""
X API Client
Read-only wrappers around the X API v2 endpoints used to export tweets.

XClient signs each request with OAuth 1.0a user context (liked tweets).
BookmarksClient uses an OAuth 2.0 user access token (bookmarks only accept OAuth 2.0).
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .auth import Credentials, OAuth1Signer
from .errors import XApiError
from .models import Tweet, parse_tweets

logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.x.com/2"
DEFAULT_TIMEOUT = 30.0

TWEET_LIST_PARAMS = {
    "tweet.fields": "created_at,author_id,public_metrics,text,attachments",
    "user.fields": "username,name",
    "expansions": "author_id,attachments.media_keys",
    "media.fields": "url,preview_image_url,type",
}


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(int(value), high))


class _BaseClient:
    """Shared request plumbing: session, timeout, error translation."""

    def __init__(self, session: Optional[requests.Session] = None,
                 base_url: str = API_BASE_URL, timeout: float = DEFAULT_TIMEOUT):
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _auth_headers(self, method: str, url: str, params: Dict[str, str]) -> Dict[str, str]:
        raise NotImplementedError

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        params = dict(params or {})
        headers = self._auth_headers("GET", url, params)
        headers["Content-Type"] = "application/json"
        logger.debug("GET %s params=%s", url, params)

        response = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        logger.debug("Response status: %s", response.status_code)
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            try:
                payload = response.json()
            except ValueError:
                payload = {"error": response.text or "Unknown error"}
            raise XApiError(response.status_code, payload, message=f"GET {path} failed") from exc
        return response.json()

    def get_user_id(self, username: str) -> str:
        """
        Resolve a username to its numeric user id.

        Args:
            username: X username (without @)

        Returns:
            User id as a string
        """
        data = self._get(f"/users/by/username/{username.lstrip('@')}", {"user.fields": "id"})
        user_id = data["data"]["id"]
        logger.debug("Resolved @%s to %s", username, user_id)
        return str(user_id)

    def _get_tweet_list(self, path: str, max_results: int) -> List[Tweet]:
        params = dict(TWEET_LIST_PARAMS, max_results=str(max_results))
        payload = self._get(path, params)
        tweets = parse_tweets(payload)
        logger.debug(
            "Fetched %s tweets (%s users included)",
            len(tweets), len((payload.get("includes") or {}).get("users") or []),
        )
        return tweets


class XClient(_BaseClient):
    """X API v2 client for OAuth 1.0a user-context endpoints."""

    def __init__(self, credentials: Credentials, **kwargs):
        """
        Initialize X API client.

        Args:
            credentials: OAuth 1.0a consumer and access token secrets
            session: Optional requests.Session to reuse
            base_url: API root, defaults to https://api.x.com/2
            timeout: Per-request timeout in seconds
        """
        super().__init__(**kwargs)
        self.signer = OAuth1Signer(credentials)

    def _auth_headers(self, method, url, params):
        return {"Authorization": self.signer.sign(method, url, params)}

    def get_liked_tweets(self, user_id: str, max_results: int = 10) -> List[Tweet]:
        """
        Get one page of tweets liked by a user.

        Args:
            user_id: Numeric user id
            max_results: Page size (the API accepts 5-100)

        Returns:
            List of tweets, newest like first
        """
        return self._get_tweet_list(f"/users/{user_id}/liked_tweets", _clamp(max_results, 5, 100))


class BookmarksClient(_BaseClient):
    """X API v2 client for the bookmarks endpoint, authenticated with an OAuth 2.0 user token."""

    def __init__(self, bearer_token: str, **kwargs):
        super().__init__(**kwargs)
        if not bearer_token:
            raise ValueError("An OAuth 2.0 user access token is required for bookmarks")
        self.headers = {"Authorization": f"Bearer {bearer_token}"}

    def _auth_headers(self, method, url, params):
        return dict(self.headers)

    def get_bookmarks(self, user_id: str, max_results: int = 10) -> List[Tweet]:
        """
        Get one page of the authenticated user's bookmarks.

        Args:
            user_id: Numeric id of the token's owner
            max_results: Page size (1-100)

        Returns:
            List of tweets
        """
        return self._get_tweet_list(f"/users/{user_id}/bookmarks", _clamp(max_results, 1, 100))
