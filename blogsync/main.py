#!/usr/bin/env python3
"""
Export X liked tweets (or bookmarks) as markdown blog posts.

Usage:
    python3 -m blogsync.main                 # sync liked tweets once
    python3 -m blogsync.main bookmarks       # sync bookmarks (OAuth 2.0 token)
    python3 -m blogsync.main watch           # sync liked tweets on an interval
    python3 -m blogsync.main likes --dry-run # log what would be written
"""
import argparse
import signal
import sys
from pathlib import Path

import requests

from xclient.client import BookmarksClient, XClient
from xclient.errors import InvalidCredential, XClientError

from .config import Config
from .posts_module import PostsModuleError
from .logger import configure_logging, logger
from .scheduler import SyncScheduler
from .sync import sync_bookmarks, sync_liked_tweets


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Turn X liked tweets and bookmarks into blog posts')
    subparsers = parser.add_subparsers(dest='command', help='Command to run')
    for name, help_text in (
        ('likes', 'Fetch liked tweets once (OAuth 1.0a)'),
        ('bookmarks', 'Fetch bookmarks once (OAuth 2.0 user token)'),
        ('watch', 'Fetch liked tweets every SYNC_INTERVAL_MINUTES'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('--dry-run', action='store_true', help='Do not write any files')
        sub.add_argument('--max', type=int, dest='max_results', help='Tweets to fetch (overrides MAX_BOOKMARKS)')
        sub.add_argument('--username', help='X username (overrides X_USERNAME)')
        sub.add_argument('--root', type=Path, help='Blog root directory (overrides BLOG_ROOT)')
    args = parser.parse_args(argv)
    if args.command is None:
        args = parser.parse_args(['likes'])
    return args


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    if args.dry_run:
        config.DRY_RUN = True
    if args.max_results is not None:
        config.MAX_BOOKMARKS = args.max_results
    if args.username:
        config.X_USERNAME = args.username.lstrip('@')
    if args.root:
        config.BLOG_ROOT = args.root
    return config


def run(config: Config, command: str) -> int:
    if command == 'bookmarks':
        if not config.X_OAUTH2_ACCESS_TOKEN:
            logger.error('X_OAUTH2_ACCESS_TOKEN is not set')
            logger.error('Run: python3 -m blogsync.oauth_pkce and add the token to .env')
            return 1
        client = BookmarksClient(config.X_OAUTH2_ACCESS_TOKEN)
        sync_bookmarks(config, client)
        return 0

    try:
        client = XClient(config.credentials())
    except InvalidCredential as e:
        logger.error('%s', e)
        logger.error('Set X_API_KEY, X_API_SECRET, X_ACCESS_TOKEN and X_ACCESS_TOKEN_SECRET')
        return 1

    if command == 'watch':
        sched = SyncScheduler(config, client)

        def _stop(signum, frame):
            logger.info('Shutting down...')
            sched.shutdown()

        signal.signal(signal.SIGINT, _stop)
        signal.signal(signal.SIGTERM, _stop)
        sched.start()
        return 0

    sync_liked_tweets(config, client)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        config = apply_overrides(Config.from_env(), args)
    except ValueError as e:
        configure_logging('INFO')
        logger.error('Invalid configuration: %s', e)
        return 1
    configure_logging(config.LOG_LEVEL)
    logger.debug('Environment configuration: %s', config.describe())

    try:
        return run(config, args.command)
    except (XClientError, PostsModuleError, requests.RequestException):
        logger.exception('Sync failed')
        return 1


if __name__ == '__main__':
    sys.exit(main())
