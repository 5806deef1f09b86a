"""
Read an existing posts.ts module back into plain Python values.

Only the subset the display app uses is understood: default imports
(`import name from 'path';`) and a `posts` array of object literals whose
values are string literals, arrays of string literals, numbers, booleans
or imported identifiers. Anything else raises PostsModuleError so that an
unrecognised file is never silently overwritten.
"""
import re
from typing import Any, Dict, List, NamedTuple, Tuple

TOKEN_RE = re.compile(r"""
    (?P<skip>\s+|//[^\n]*|/\*.*?\*/)
  | (?P<string>'(?:\\.|[^'\\\n])*'|"(?:\\.|[^"\\\n])*")
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<ident>[A-Za-z_$][\w$]*)
  | (?P<punct>[\[\]{}:,;=])
  | (?P<other>.)
""", re.VERBOSE | re.DOTALL)

ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\n|.)", re.DOTALL)
SIMPLE_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f', 'v': '\v', '0': '\0', '\n': ''}
LITERALS = {'true': True, 'false': False, 'null': None}


class PostsModuleError(ValueError):
    """posts.ts contains something this tool cannot rewrite faithfully."""


class Ref(NamedTuple):
    """A bare identifier used as a value, e.g. `content: helloMd`."""
    name: str


class Token(NamedTuple):
    kind: str
    value: str
    line: int


def _unescape(match) -> str:
    seq = match.group(1)
    if seq.startswith('u{'):
        return chr(int(seq[2:-1], 16))
    if seq[0] in 'ux' and len(seq) > 1:
        return chr(int(seq[1:], 16))
    return SIMPLE_ESCAPES.get(seq, seq)


def decode_string(literal: str) -> str:
    return ESCAPE_RE.sub(_unescape, literal[1:-1])


def tokenize(source: str) -> List[Token]:
    tokens = []
    line = 1
    for match in TOKEN_RE.finditer(source):
        kind, value = match.lastgroup, match.group()
        if kind != 'skip':
            tokens.append(Token(kind, value, line))
        line += value.count('\n')
    return tokens


class _Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0):
        idx = self.pos + offset
        return self.tokens[idx] if idx < len(self.tokens) else None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise PostsModuleError('Unexpected end of posts.ts')
        self.pos += 1
        return token

    def expect(self, value: str) -> Token:
        token = self.next()
        if token.value != value:
            raise PostsModuleError(f'Expected {value!r} on line {token.line}, found {token.value!r}')
        return token

    def value(self) -> Any:
        token = self.next()
        if token.kind == 'string':
            return decode_string(token.value)
        if token.kind == 'number':
            return float(token.value) if '.' in token.value else int(token.value)
        if token.kind == 'ident':
            return LITERALS[token.value] if token.value in LITERALS else Ref(token.value)
        if token.value == '[':
            return self.sequence(']', self.value)
        if token.value == '{':
            return dict(self.sequence('}', self.member))
        raise PostsModuleError(f'Unsupported value {token.value!r} on line {token.line}')

    def member(self) -> Tuple[str, Any]:
        key = self.next()
        if key.kind == 'string':
            name = decode_string(key.value)
        elif key.kind == 'ident':
            name = key.value
        else:
            raise PostsModuleError(f'Unsupported object key {key.value!r} on line {key.line}')
        self.expect(':')
        return name, self.value()

    def sequence(self, close: str, item) -> list:
        items = []
        while True:
            token = self.peek()
            if token is None:
                raise PostsModuleError(f'Unterminated {close!r} in posts.ts')
            if token.value == close:
                self.pos += 1
                return items
            items.append(item())
            if self.peek() is not None and self.peek().value == ',':
                self.pos += 1


def parse_module(source: str) -> Tuple[Dict[str, str], List[Dict[str, Any]]]:
    """
    Parse posts.ts.

    Returns:
        (imports, posts): default-import name -> module path, and the raw
        post objects in file order

    Raises:
        PostsModuleError: no `posts` array or an unsupported construct in it
    """
    parser = _Parser(tokenize(source))
    imports: Dict[str, str] = {}
    posts = None
    while parser.peek() is not None:
        token = parser.next()
        if token.kind != 'ident':
            continue
        if token.value == 'import':
            name, keyword, path = parser.peek(), parser.peek(1), parser.peek(2)
            if name and name.kind == 'ident' and keyword and keyword.value == 'from' and path and path.kind == 'string':
                imports[name.value] = decode_string(path.value)
                parser.pos += 3
        elif token.value in ('const', 'let', 'var') and parser.peek() is not None and parser.peek().value == 'posts':
            while parser.next().value != '=':
                pass
            posts = parser.value()
    if not isinstance(posts, list) or not all(isinstance(p, dict) for p in posts):
        raise PostsModuleError('posts.ts does not define a `posts` array of objects')
    return imports, posts
