"""
HTTP client for the Photofeed API with a read-through query cache.

Queries are served from the cache while fresh. Each mutation invalidates the
queries whose results it changes; nothing is updated optimistically.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from photofeed.client.cache import QueryCache, QueryKey

logger = logging.getLogger(__name__)

POSTS_STALE_TIME = 30.0
PROFILE_STALE_TIME = 60.0
EXPLORE_STALE_TIME = 60.0

FEED_KEY: QueryKey = ("/api/posts",)
STORIES_KEY: QueryKey = ("/api/stories",)
NOTIFICATIONS_KEY: QueryKey = ("/api/notifications",)
TRENDING_KEY: QueryKey = ("/api/explore/trending",)
HASHTAGS_KEY: QueryKey = ("/api/explore/hashtags",)
SUGGESTED_USERS_KEY: QueryKey = ("/api/explore/users",)
SEARCH_KEY: QueryKey = ("/api/search",)


class ApiError(Exception):
    """Non-2xx response from the API"""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class FeedClient:
    def __init__(self, http: httpx.Client, cache: Optional[QueryCache] = None):
        self.http = http
        self.cache = cache if cache is not None else QueryCache()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, path, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("message", response.reason_phrase)
            except ValueError:
                message = response.text or response.reason_phrase
            raise ApiError(response.status_code, message)
        return response.json()

    def _query(self, key: QueryKey, path: str, stale_time: float, **kwargs) -> Any:
        return self.cache.fetch(
            key,
            lambda: self._request("GET", path, **kwargs),
            stale_time=stale_time
        )

    # Queries

    def current_user(self) -> Dict[str, Any]:
        return self._query(("/api/auth/user",), "/api/auth/user", PROFILE_STALE_TIME)

    def feed(self) -> List[Dict[str, Any]]:
        return self._query(FEED_KEY, "/api/posts", POSTS_STALE_TIME)

    def post(self, post_id: int) -> Dict[str, Any]:
        return self._query(("/api/posts", post_id), f"/api/posts/{post_id}", POSTS_STALE_TIME)

    def profile(self, username: str) -> Dict[str, Any]:
        path = f"/api/users/{username}"
        return self._query((path,), path, PROFILE_STALE_TIME)

    def user_posts(self, username: str) -> List[Dict[str, Any]]:
        path = f"/api/users/{username}/posts"
        return self._query((path,), path, POSTS_STALE_TIME)

    def saved_posts(self, username: str) -> List[Dict[str, Any]]:
        path = f"/api/users/{username}/saved"
        return self._query((path,), path, POSTS_STALE_TIME)

    def stories(self) -> List[Dict[str, Any]]:
        return self._query(STORIES_KEY, "/api/stories", PROFILE_STALE_TIME)

    def notifications(self) -> List[Dict[str, Any]]:
        return self._query(NOTIFICATIONS_KEY, "/api/notifications", POSTS_STALE_TIME)

    def trending_posts(self) -> List[Dict[str, Any]]:
        return self._query(TRENDING_KEY, "/api/explore/trending", EXPLORE_STALE_TIME)

    def trending_hashtags(self) -> List[Dict[str, Any]]:
        return self._query(HASHTAGS_KEY, "/api/explore/hashtags", EXPLORE_STALE_TIME)

    def suggested_users(self) -> List[Dict[str, Any]]:
        return self._query(SUGGESTED_USERS_KEY, "/api/explore/users", EXPLORE_STALE_TIME)

    def search(self, query: str) -> Dict[str, Any]:
        return self._query(
            SEARCH_KEY + (query,),
            "/api/search",
            POSTS_STALE_TIME,
            params={"q": query}
        )

    # Mutations

    def _invalidate_post(self, post_id: int) -> None:
        self.cache.invalidate(FEED_KEY)
        self.cache.invalidate(("/api/posts", post_id))

    def toggle_like(self, post: Dict[str, Any]) -> Any:
        method = "DELETE" if post.get("isLiked") else "POST"
        result = self._request(method, f"/api/posts/{post['id']}/like")
        self._invalidate_post(post["id"])
        return result

    def toggle_save(self, post: Dict[str, Any]) -> Any:
        method = "DELETE" if post.get("isSaved") else "POST"
        result = self._request(method, f"/api/posts/{post['id']}/save")
        self._invalidate_post(post["id"])
        return result

    def add_comment(self, post_id: int, content: str) -> Dict[str, Any]:
        result = self._request("POST", f"/api/posts/{post_id}/comments", json={"content": content})
        self._invalidate_post(post_id)
        return result

    def create_post(
        self,
        image: bytes,
        caption: str,
        location: Optional[str] = None,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg"
    ) -> Dict[str, Any]:
        data = {"caption": caption}
        if location:
            data["location"] = location
        result = self._request(
            "POST",
            "/api/posts",
            data=data,
            files={"image": (filename, image, content_type)}
        )
        self.cache.invalidate(FEED_KEY)
        return result

    def _invalidate_follow(self, username: Optional[str]) -> None:
        if username:
            self.cache.invalidate((f"/api/users/{username}",))
        self.cache.invalidate(SUGGESTED_USERS_KEY)
        self.cache.invalidate(NOTIFICATIONS_KEY)
        self.cache.invalidate(SEARCH_KEY)

    def follow(self, user_id: str, username: Optional[str] = None) -> Dict[str, Any]:
        result = self._request("POST", f"/api/users/{user_id}/follow")
        self._invalidate_follow(username)
        return result

    def unfollow(self, user_id: str, username: Optional[str] = None) -> Dict[str, Any]:
        result = self._request("DELETE", f"/api/users/{user_id}/follow")
        self._invalidate_follow(username)
        return result
