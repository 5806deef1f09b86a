"""
Post index for the display app.

The index is a list of PostEntry records kept in src/data/posts.json.
Every save rewrites src/data/posts.ts in full from that list, so the
generated module never needs patching in place. A site that only has a
posts.ts is read through posts_module the first time.
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Set

from .logger import logger
from .posts_module import PostsModuleError, Ref, parse_module

INDEX_FILENAME = 'posts.json'
MODULE_FILENAME = 'posts.ts'
STANDARD_KEYS = ('id', 'title', 'date', 'author', 'categories', 'excerpt', 'content')
JS_IDENT_RE = re.compile(r'^[A-Za-z_$][\w$]*$')


def default_content_path(post_id: str) -> str:
    return f'../pages/posts/{post_id}.md?raw'


def _contains_ref(value: Any) -> bool:
    if isinstance(value, Ref):
        return True
    if isinstance(value, list):
        return any(_contains_ref(v) for v in value)
    if isinstance(value, dict):
        return any(_contains_ref(v) for v in value.values())
    return False


class PostEntry(NamedTuple):
    id: str
    title: str
    date: str
    author: str
    categories: List[str]
    excerpt: str
    # None: the post's own markdown file; '': the post has no content import
    content_path: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None

    @property
    def import_name(self) -> str:
        name = re.sub(r'[^\w$]', '_', self.id)
        if name[:1].isdigit():
            name = '_' + name
        return name + 'Md'

    @property
    def content_module(self) -> str:
        return default_content_path(self.id) if self.content_path is None else self.content_path

    @classmethod
    def from_dict(cls, raw: dict) -> PostEntry:
        return cls(
            id=raw['id'],
            title=raw.get('title', ''),
            date=raw.get('date', ''),
            author=raw.get('author', 'Unknown'),
            categories=list(raw.get('categories') or []),
            excerpt=raw.get('excerpt', ''),
            content_path=raw.get('content_path'),
            extra=raw.get('extra') or None,
        )

    def to_dict(self) -> dict:
        data = self._asdict()
        if data['content_path'] is None:
            del data['content_path']
        if not data['extra']:
            del data['extra']
        return data

    @classmethod
    def from_module_object(cls, raw: Dict[str, Any], imports: Dict[str, str]) -> PostEntry:
        """Build an entry from one object literal of an existing posts.ts."""
        post_id = raw.get('id')
        if not isinstance(post_id, str) or not post_id:
            raise PostsModuleError(f'Post without a string id in posts.ts: {raw!r}')

        content = raw.get('content')
        if content is None:
            content_path = ''
        elif isinstance(content, Ref) and content.name in imports:
            content_path = imports[content.name]
        else:
            raise PostsModuleError(f'Post {post_id!r}: content must be an imported identifier')

        extra = {k: v for k, v in raw.items() if k not in STANDARD_KEYS}
        if _contains_ref(extra):
            raise PostsModuleError(f'Post {post_id!r}: only literal values are supported besides content')

        categories = raw.get('categories') or []
        if not isinstance(categories, list) or not all(isinstance(c, str) for c in categories):
            raise PostsModuleError(f'Post {post_id!r}: categories must be a list of strings')

        fields = {}
        for key, default in (('title', ''), ('date', ''), ('author', 'Unknown'), ('excerpt', '')):
            value = raw.get(key, default)
            if not isinstance(value, str):
                raise PostsModuleError(f'Post {post_id!r}: {key} must be a string')
            fields[key] = value

        return cls(
            id=post_id,
            categories=list(categories),
            content_path=None if content_path == default_content_path(post_id) else content_path,
            extra=extra or None,
            **fields,
        )


def _js(value) -> str:
    return json.dumps(value, ensure_ascii=False)


def _js_key(key: str) -> str:
    return key if JS_IDENT_RE.match(key) else _js(key)


def render_module(entries: Iterable[PostEntry]) -> str:
    """Serialize entries as the posts.ts module imported by the display app."""
    entries = list(entries)
    lines = [
        f"import {e.import_name} from '{e.content_module}';"
        for e in entries if e.content_module
    ]
    if lines:
        lines.append('')
    if entries:
        lines.append('const posts = [')
        for e in entries:
            lines.extend([
                '  {',
                f'    id: {_js(e.id)},',
                f'    title: {_js(e.title)},',
                f'    date: {_js(e.date)},',
                f'    author: {_js(e.author)},',
                f'    categories: {_js(list(e.categories))},',
                f'    excerpt: {_js(e.excerpt)},',
            ])
            lines.extend(f'    {_js_key(k)}: {_js(v)},' for k, v in (e.extra or {}).items())
            if e.content_module:
                lines.append(f'    content: {e.import_name},')
            lines.append('  },')
        lines.append('];')
    else:
        lines.append('const posts = [];')
    lines.extend(['', 'export { posts };', 'export default posts;', ''])
    return '\n'.join(lines)


class PostIndex:
    """Ordered, de-duplicated list of published posts."""

    def __init__(self, data_dir: Path, entries: Iterable[PostEntry] = ()):
        self.data_dir = Path(data_dir)
        self._entries: List[PostEntry] = []
        self._ids: Set[str] = set()
        for entry in entries:
            self.append(entry)

    @property
    def index_path(self) -> Path:
        return self.data_dir / INDEX_FILENAME

    @property
    def module_path(self) -> Path:
        return self.data_dir / MODULE_FILENAME

    @classmethod
    def load(cls, data_dir: Path) -> PostIndex:
        index = cls(data_dir)
        if index.index_path.exists():
            with index.index_path.open('r', encoding='utf-8') as fh:
                raw = json.load(fh)
            for item in raw:
                index.append(PostEntry.from_dict(item))
            logger.debug('Loaded %s existing posts from %s', len(index), index.index_path)
        elif index.module_path.exists():
            imports, posts = parse_module(index.module_path.read_text(encoding='utf-8'))
            for item in posts:
                index.append(PostEntry.from_module_object(item, imports))
            logger.info('Imported %s existing posts from %s', len(index), index.module_path)
        return index

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, post_id: str) -> bool:
        return post_id in self._ids

    @property
    def entries(self) -> List[PostEntry]:
        return list(self._entries)

    def append(self, entry: PostEntry) -> bool:
        """Add an entry; returns False if its id is already present."""
        if entry.id in self._ids:
            return False
        self._entries.append(entry)
        self._ids.add(entry.id)
        return True

    def save(self):
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with self.index_path.open('w', encoding='utf-8') as fh:
            json.dump([e.to_dict() for e in self._entries], fh, indent=2, ensure_ascii=False)
            fh.write('\n')
        self.module_path.write_text(render_module(self._entries), encoding='utf-8')
        logger.info('Wrote %s posts to %s', len(self), self.module_path)
