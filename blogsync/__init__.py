"""Export X liked tweets and bookmarks as markdown blog posts."""

__version__ = "0.1.0"
