"""Render tweets as markdown blog posts."""
import re
from datetime import datetime
from typing import Optional

from xclient.models import Tweet

URL_RE = re.compile(r'(https?://\S+)')
TITLE_MAX = 100
EXCERPT_MAX = 200


def parse_created_at(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def long_date(value: Optional[str]) -> str:
    """'2024-03-05T10:00:00.000Z' -> 'March 5, 2024'."""
    dt = parse_created_at(value)
    if dt is None:
        return 'an unknown date'
    return f'{dt:%B} {dt.day}, {dt.year}'


def month_year(value: Optional[str]) -> str:
    dt = parse_created_at(value)
    return f'{dt:%B %Y}' if dt else 'Unknown'


def title_for(text: str) -> str:
    return text.strip().split('\n')[0][:TITLE_MAX]


def excerpt_for(text: str) -> str:
    excerpt = text[:EXCERPT_MAX].strip()
    return excerpt + '...' if len(text) > EXCERPT_MAX else excerpt


def author_for(tweet: Tweet) -> str:
    return tweet.author_name or tweet.author_username or 'Unknown'


def linkify(text: str) -> str:
    return URL_RE.sub(r'[\1](\1)', text)


def _header(tweet: Tweet, heading: str) -> str:
    username = tweet.author_username or 'unknown'
    return (
        f'{heading} {title_for(tweet.text)}\n\n'
        f'**Originally posted by [@{username}](https://x.com/{username})** on {long_date(tweet.created_at)}\n\n'
        f'[View original tweet]({tweet.url})\n\n'
        '---\n\n'
        f'{linkify(tweet.text.strip())}\n'
    )


def liked_tweet_to_markdown(tweet: Tweet) -> str:
    return (
        _header(tweet, '#')
        + '\n---\n\n'
        '## Metrics\n\n'
        f"- 👍 Likes: {tweet.metric('like_count')}\n"
        f"- 🔄 Retweets: {tweet.metric('retweet_count')}\n"
        f"- 💬 Replies: {tweet.metric('reply_count')}\n"
    )


def bookmark_to_markdown(tweet: Tweet) -> str:
    return _header(tweet, '##')
