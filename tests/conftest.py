"""Shared fixtures: stub HTTP session and sample API payloads."""
import json

import pytest
import requests


def make_response(status_code, payload, url="https://api.x.com/2/test"):
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(payload).encode("utf-8")
    resp.encoding = "utf-8"
    resp.url = url
    return resp


class FakeSession:
    """Records requests and replays queued responses in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"method": "GET", "url": url, "headers": headers, "params": params, "timeout": timeout})
        return self.responses.pop(0)

    def post(self, url, **kwargs):
        self.calls.append(dict(kwargs, method="POST", url=url))
        return self.responses.pop(0)


LIKED_PAYLOAD = {
    "data": [
        {
            "id": "1800000000000000001",
            "text": "Shipping a new release today https://example.com/notes\nMore details inside.",
            "created_at": "2024-03-05T10:15:00.000Z",
            "author_id": "42",
            "public_metrics": {"like_count": 12, "retweet_count": 3, "reply_count": 1},
        },
        {
            "id": "1800000000000000002",
            "text": "A tweet from someone not in includes",
            "created_at": "2024-04-01T00:00:00.000Z",
            "author_id": "99",
        },
    ],
    "includes": {"users": [{"id": "42", "username": "octo", "name": "Octo Cat"}]},
}


@pytest.fixture
def liked_payload():
    return json.loads(json.dumps(LIKED_PAYLOAD))


@pytest.fixture
def credentials():
    from xclient.auth import Credentials
    return Credentials("ckey", "csecret", "atoken", "asecret")


# posts.ts as written before posts.json existed: single quotes, trailing commas, a hand-written post
EXISTING_POSTS_TS = """import helloMd from '../pages/posts/hello.md?raw';
import x_liked_1800000000000000001Md from '../pages/posts/x-liked-1800000000000000001.md?raw';

const posts = [
  {
    id: 'hello',
    title: 'Hello, world',
    date: 'January 2024',
    author: 'Gauri',
    categories: ['Personal'],
    excerpt: 'It\\'s the first post',
    featured: true,
    content: helloMd,
  },
  {
    id: 'x-liked-1800000000000000001',
    title: 'Shipping a tiny parser today',
    date: 'March 2024',
    author: 'Octo Cat',
    categories: ['X Liked', 'Curated'],
    excerpt: 'Shipping a tiny parser today',
    content: x_liked_1800000000000000001Md,
  },
];

export { posts };
export default posts;
"""
