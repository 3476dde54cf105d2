import json
from collections import Counter

import httpx
import pytest

from photofeed.client.api import ApiError, FeedClient
from photofeed.client.cache import QueryCache

class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def cache(clock):
    return QueryCache(clock=clock)

def test_cache_serves_fresh_entries(cache, clock):
    calls = []

    def fetcher():
        calls.append(1)
        return ["post"]

    assert cache.fetch(("/api/posts",), fetcher, stale_time=30) == ["post"]
    clock.advance(29)
    assert cache.fetch(("/api/posts",), fetcher, stale_time=30) == ["post"]
    assert len(calls) == 1

    clock.advance(1)
    cache.fetch(("/api/posts",), fetcher, stale_time=30)
    assert len(calls) == 2

def test_cache_keeps_empty_results(cache):
    calls = []

    def fetcher():
        calls.append(1)
        return []

    cache.fetch(("/api/notifications",), fetcher)
    cache.fetch(("/api/notifications",), fetcher)

    assert len(calls) == 1

def test_invalidate_by_prefix(cache):
    cache.set(("/api/posts",), [])
    cache.set(("/api/posts", 1), {})
    cache.set(("/api/posts", 2), {})
    cache.set(("/api/users/ada",), {})

    assert cache.invalidate(("/api/posts", 1)) == 1
    assert ("/api/posts", 2) in cache
    assert cache.invalidate(("/api/posts",)) == 2
    assert len(cache) == 1
    assert cache.invalidate(("/api/stories",)) == 0

    cache.clear()
    assert len(cache) == 0

def test_get_returns_none_when_stale(cache, clock):
    cache.set(("/api/stories",), ["story"], stale_time=60)
    clock.advance(60)

    assert cache.get(("/api/stories",)) is None

class FakeApi:
    """In-memory stand-in for the HTTP API that counts requests per route"""

    def __init__(self):
        self.requests = Counter()
        self.liked = False

    def post_body(self):
        return {"id": 1, "caption": "hi", "isLiked": self.liked, "likesCount": int(self.liked)}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        route = f"{request.method} {request.url.path}"
        self.requests[route] += 1

        if route == "GET /api/posts":
            return httpx.Response(200, json=[self.post_body()])
        if route == "GET /api/posts/1":
            return httpx.Response(200, json=self.post_body())
        if route == "POST /api/posts/1/like":
            self.liked = True
            return httpx.Response(200, json={"userId": "me", "postId": 1})
        if route == "DELETE /api/posts/1/like":
            self.liked = False
            return httpx.Response(200, json={"success": True})
        if route == "POST /api/posts/1/comments":
            return httpx.Response(201, json={"id": 9, **json.loads(request.content)})
        if route == "POST /api/posts":
            return httpx.Response(201, json=self.post_body())
        if route.startswith("GET /api/users/"):
            return httpx.Response(200, json={"username": request.url.path.rsplit("/", 1)[-1]})
        if route in ("POST /api/users/u2/follow", "DELETE /api/users/u2/follow"):
            return httpx.Response(200, json={"success": True})
        if route == "GET /api/explore/users":
            return httpx.Response(200, json=[])
        if route == "GET /api/search":
            return httpx.Response(200, json={"users": [], "posts": [], "hashtags": []})
        return httpx.Response(404, json={"message": "Post not found"})

@pytest.fixture
def fake_api():
    return FakeApi()

@pytest.fixture
def feed_client(fake_api, cache):
    http = httpx.Client(transport=httpx.MockTransport(fake_api), base_url="http://test")
    yield FeedClient(http, cache)
    http.close()

def test_queries_are_cached(feed_client, fake_api):
    feed_client.feed()
    feed_client.feed()
    feed_client.post(1)
    feed_client.post(1)

    assert fake_api.requests["GET /api/posts"] == 1
    assert fake_api.requests["GET /api/posts/1"] == 1

def test_toggle_like_refetches_feed_and_post(feed_client, fake_api):
    post = feed_client.feed()[0]
    feed_client.post(1)

    feed_client.toggle_like(post)

    assert fake_api.requests["POST /api/posts/1/like"] == 1
    assert feed_client.feed()[0]["isLiked"] is True
    assert feed_client.post(1)["likesCount"] == 1
    assert fake_api.requests["GET /api/posts"] == 2
    assert fake_api.requests["GET /api/posts/1"] == 2

    feed_client.toggle_like(feed_client.feed()[0])
    assert fake_api.requests["DELETE /api/posts/1/like"] == 1
    assert feed_client.feed()[0]["isLiked"] is False

def test_add_comment_invalidates_post(feed_client, fake_api):
    feed_client.post(1)

    comment = feed_client.add_comment(1, "Great shot")

    assert comment["content"] == "Great shot"
    feed_client.post(1)
    assert fake_api.requests["GET /api/posts/1"] == 2

def test_create_post_invalidates_feed(feed_client, fake_api):
    feed_client.feed()

    feed_client.create_post(b"\xff\xd8\xff", "New photo", location="Oslo")

    feed_client.feed()
    assert fake_api.requests["POST /api/posts"] == 1
    assert fake_api.requests["GET /api/posts"] == 2

def test_follow_invalidates_profile_and_suggestions(feed_client, fake_api):
    feed_client.profile("bob")
    feed_client.profile("carol")
    feed_client.suggested_users()
    feed_client.search("bo")

    feed_client.follow("u2", username="bob")

    feed_client.profile("bob")
    feed_client.profile("carol")
    feed_client.suggested_users()
    feed_client.search("bo")
    assert fake_api.requests["GET /api/users/bob"] == 2
    assert fake_api.requests["GET /api/users/carol"] == 1
    assert fake_api.requests["GET /api/explore/users"] == 2
    assert fake_api.requests["GET /api/search"] == 2

    feed_client.unfollow("u2", username="bob")
    feed_client.profile("bob")
    assert fake_api.requests["GET /api/users/bob"] == 3

def test_errors_raise_api_error(feed_client):
    with pytest.raises(ApiError) as exc_info:
        feed_client.post(404)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Post not found"

def test_failed_mutation_keeps_cache(feed_client, fake_api):
    feed_client.feed()

    with pytest.raises(ApiError):
        feed_client.toggle_save({"id": 1, "isSaved": False})

    feed_client.feed()
    assert fake_api.requests["GET /api/posts"] == 1
