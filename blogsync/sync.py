"""
Sync pipeline: fetch tweets, render them as posts, update the post index.

Workflow:
1. Resolve the configured username to a user id
2. Fetch one page of liked tweets (or bookmarks)
3. Skip tweets already published
4. Write one markdown file per new tweet
5. Append the new entries to the index and regenerate posts.ts
"""
from typing import Callable, List, NamedTuple, Optional

from xclient.client import BookmarksClient, XClient
from xclient.models import Tweet

from .config import Config
from .logger import logger
from .markdown import (
    author_for,
    bookmark_to_markdown,
    excerpt_for,
    liked_tweet_to_markdown,
    month_year,
    title_for,
)
from .posts_store import PostEntry, PostIndex


class Source(NamedTuple):
    label: str
    slug_prefix: str
    categories: List[str]
    render: Callable[[Tweet], str]


LIKES = Source('liked tweets', 'x-liked-', ['X Liked', 'Curated'], liked_tweet_to_markdown)
BOOKMARKS = Source('bookmarks', 'x-bookmark-', ['X Bookmark', 'Curated'], bookmark_to_markdown)


def entry_for(tweet: Tweet, source: Source) -> PostEntry:
    return PostEntry(
        id=f'{source.slug_prefix}{tweet.id}',
        title=title_for(tweet.text),
        date=month_year(tweet.created_at),
        author=author_for(tweet),
        categories=list(source.categories),
        excerpt=excerpt_for(tweet.text),
    )


def publish(tweets: List[Tweet], source: Source, config: Config, index: PostIndex) -> List[PostEntry]:
    """
    Write posts for tweets not yet in the index.

    Returns:
        The entries added, in tweet order
    """
    new_entries: List[PostEntry] = []
    if not config.DRY_RUN:
        config.posts_dir.mkdir(parents=True, exist_ok=True)

    for tweet in tweets:
        entry = entry_for(tweet, source)
        if entry.id in index:
            logger.info('Skipping existing post: %s', entry.id)
            continue

        markdown = source.render(tweet)
        md_path = config.posts_dir / f'{entry.id}.md'
        if config.DRY_RUN:
            logger.info('[DRY_RUN] Would write %s (%s bytes)', md_path, len(markdown))
        else:
            md_path.write_text(markdown, encoding='utf-8')
            logger.info('✓ Created: %s', md_path)
        logger.debug('  Author: %s, text length: %s chars', entry.author, len(tweet.text))

        index.append(entry)
        new_entries.append(entry)

    if not new_entries:
        logger.info('No new posts to add')
        return new_entries

    if config.DRY_RUN:
        logger.info('[DRY_RUN] Would add %s posts to %s', len(new_entries), index.module_path)
    else:
        index.save()
    return new_entries


def _fetch_and_publish(fetch, user_lookup, source: Source, config: Config,
                       index: Optional[PostIndex]) -> List[PostEntry]:
    logger.info('Fetching X %s for @%s (max %s)', source.label, config.X_USERNAME, config.MAX_BOOKMARKS)
    user_id = user_lookup(config.X_USERNAME)
    logger.info('Found user ID: %s', user_id)

    tweets = fetch(user_id, config.MAX_BOOKMARKS)
    if not tweets:
        logger.info('No %s found', source.label)
        return []
    logger.info('Fetched %s %s', len(tweets), source.label)

    if index is None:
        index = PostIndex.load(config.data_dir)
    entries = publish(tweets, source, config, index)
    if entries:
        logger.info('Created %s new blog posts from X %s', len(entries), source.label)
    return entries


def sync_liked_tweets(config: Config, client: XClient, index: Optional[PostIndex] = None) -> List[PostEntry]:
    return _fetch_and_publish(client.get_liked_tweets, client.get_user_id, LIKES, config, index)


def sync_bookmarks(config: Config, client: BookmarksClient, index: Optional[PostIndex] = None) -> List[PostEntry]:
    return _fetch_and_publish(client.get_bookmarks, client.get_user_id, BOOKMARKS, config, index)
