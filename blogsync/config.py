import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from xclient.auth import Credentials
from xclient.errors import InvalidCredential
from xclient.utils import mask_secret

CREDENTIAL_VARS = ('X_API_KEY', 'X_API_SECRET', 'X_ACCESS_TOKEN', 'X_ACCESS_TOKEN_SECRET')


def _int(env: Mapping[str, str], name: str, default: str) -> int:
    raw = env.get(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _flag(value: Optional[str], default: str = 'false') -> bool:
    return (value or default).lower() in ('1', 'true', 'yes')


class Config:
    """Settings for one process, built once from the environment and passed around."""

    def __init__(self, env: Mapping[str, str]):
        self.X_API_KEY = env.get('X_API_KEY')
        self.X_API_SECRET = env.get('X_API_SECRET')
        self.X_ACCESS_TOKEN = env.get('X_ACCESS_TOKEN')
        self.X_ACCESS_TOKEN_SECRET = env.get('X_ACCESS_TOKEN_SECRET')

        self.X_OAUTH2_ACCESS_TOKEN = env.get('X_OAUTH2_ACCESS_TOKEN')
        self.X_CLIENT_ID = env.get('X_CLIENT_ID')
        self.X_CLIENT_SECRET = env.get('X_CLIENT_SECRET')
        self.X_REDIRECT_URI = env.get('X_REDIRECT_URI', 'http://localhost:5173/callback')

        self.X_USERNAME = env.get('X_USERNAME', 'gauri__gupta')
        self.MAX_BOOKMARKS = _int(env, 'MAX_BOOKMARKS', '10')

        self.BLOG_ROOT = Path(env.get('BLOG_ROOT', '.'))
        self.SYNC_INTERVAL_MINUTES = _int(env, 'SYNC_INTERVAL_MINUTES', '60')

        self.DEBUG = _flag(env.get('DEBUG'))
        self.DRY_RUN = _flag(env.get('DRY_RUN'))
        self.LOG_LEVEL = 'DEBUG' if self.DEBUG else env.get('LOG_LEVEL', 'INFO').upper()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Config':
        if environ is None:
            load_dotenv()
            environ = os.environ
        return cls(environ)

    @property
    def posts_dir(self) -> Path:
        return self.BLOG_ROOT / 'src' / 'pages' / 'posts'

    @property
    def data_dir(self) -> Path:
        return self.BLOG_ROOT / 'src' / 'data'

    def credentials(self) -> Credentials:
        missing = [name for name in CREDENTIAL_VARS if not getattr(self, name)]
        if missing:
            raise InvalidCredential(f"OAuth 1.0a credentials not set: {', '.join(missing)}")
        return Credentials(self.X_API_KEY, self.X_API_SECRET, self.X_ACCESS_TOKEN, self.X_ACCESS_TOKEN_SECRET)

    def describe(self) -> dict:
        """Summary safe to log: secrets are reduced to their length."""
        return {
            'X_USERNAME': self.X_USERNAME,
            'MAX_BOOKMARKS': self.MAX_BOOKMARKS,
            'X_API_KEY': mask_secret(self.X_API_KEY),
            'X_API_SECRET': mask_secret(self.X_API_SECRET),
            'X_ACCESS_TOKEN': mask_secret(self.X_ACCESS_TOKEN),
            'X_ACCESS_TOKEN_SECRET': mask_secret(self.X_ACCESS_TOKEN_SECRET),
            'X_OAUTH2_ACCESS_TOKEN': mask_secret(self.X_OAUTH2_ACCESS_TOKEN),
            'BLOG_ROOT': str(self.BLOG_ROOT),
            'DRY_RUN': self.DRY_RUN,
        }
