"""
Models
Lightweight records for the parts of X API v2 responses this package uses.
"""
from typing import Any, Dict, List, NamedTuple, Optional


class User(NamedTuple):
    """X user from includes.users."""
    id: str
    username: str
    name: Optional[str] = None


class Tweet(NamedTuple):
    """Tweet enriched with its author's handle and display name."""
    id: str
    text: str
    created_at: Optional[str] = None
    author_id: Optional[str] = None
    public_metrics: Optional[Dict[str, int]] = None
    author_username: Optional[str] = None
    author_name: Optional[str] = None
    url: Optional[str] = None

    def metric(self, name: str) -> int:
        return int((self.public_metrics or {}).get(name) or 0)


def tweet_url(username: Optional[str], tweet_id: str) -> str:
    # x.com/i/status/<id> resolves without knowing the author
    return f"https://x.com/{username or 'i'}/status/{tweet_id}"


def parse_tweets(payload: Dict[str, Any]) -> List[Tweet]:
    """
    Build Tweet records from a v2 list response, joining includes.users on author_id.

    Args:
        payload: Decoded JSON body ({"data": [...], "includes": {"users": [...]}})

    Returns:
        Tweets in response order; empty when the response has no data
    """
    users = {}
    for raw in (payload.get("includes") or {}).get("users") or []:
        user = User(id=str(raw["id"]), username=raw.get("username", ""), name=raw.get("name"))
        users[user.id] = user

    tweets = []
    for raw in payload.get("data") or []:
        author_id = str(raw["author_id"]) if raw.get("author_id") is not None else None
        author = users.get(author_id)
        username = author.username if author else None
        tweets.append(Tweet(
            id=str(raw["id"]),
            text=raw.get("text", ""),
            created_at=raw.get("created_at"),
            author_id=author_id,
            public_metrics=raw.get("public_metrics") or {},
            author_username=username,
            author_name=author.name if author else None,
            url=tweet_url(username, str(raw["id"])),
        ))
    return tweets
