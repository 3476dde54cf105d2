"""
Plain-text renderers for API payloads.

Each list renderer takes ``None`` while the query is still loading, an empty
list for the empty state, or the populated list.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

LOADING = "Loading..."


def parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def time_ago(timestamp: str, now: Optional[datetime] = None) -> str:
    """Human distance between a timestamp and now, e.g. "5 minutes ago" """
    now = now or datetime.now(timezone.utc)
    seconds = max((now - parse_timestamp(timestamp)).total_seconds(), 0)
    minutes = round(seconds / 60)

    if seconds < 45:
        return "less than a minute ago"
    if minutes < 45:
        return f"{_plural(max(minutes, 1), 'minute')} ago"
    if minutes < 24 * 60:
        return f"about {_plural(max(round(minutes / 60), 1), 'hour')} ago"
    days = round(minutes / (24 * 60))
    if days < 30:
        return f"{_plural(days, 'day')} ago"
    months = round(days / 30)
    if months < 12:
        prefix = "about " if months == 1 else ""
        return f"{prefix}{_plural(months, 'month')} ago"
    return f"about {_plural(round(days / 365), 'year')} ago"


def display_name(user: Dict[str, Any]) -> str:
    full_name = " ".join(
        part for part in (user.get("firstName"), user.get("lastName")) if part
    )
    return full_name or user.get("username") or ""


def render_comment(comment: Dict[str, Any]) -> str:
    return f"  {comment['user'].get('username')}: {comment['content']}"


def render_post(post: Dict[str, Any], now: Optional[datetime] = None) -> str:
    user = post["user"]
    lines = [f"@{user.get('username')} · {time_ago(post['createdAt'], now)}"]
    if post.get("location"):
        lines.append(post["location"])

    like_mark = "♥" if post.get("isLiked") else "♡"
    save_mark = " [saved]" if post.get("isSaved") else ""
    lines.append(f"{like_mark} {post['likesCount']}  comments {post['commentsCount']}{save_mark}")
    lines.append(f"{user.get('username')} {post['caption']}")

    preview = post.get("comments") or []
    if post["commentsCount"] > len(preview):
        lines.append(f"  View all {post['commentsCount']} comments")
    lines.extend(render_comment(comment) for comment in preview)

    return "\n".join(lines)


def render_post_list(posts: Optional[List[Dict[str, Any]]], now: Optional[datetime] = None) -> str:
    if posts is None:
        return LOADING
    if not posts:
        return "No posts yet\nFollow some users to see their posts in your feed."
    return "\n\n".join(render_post(post, now) for post in posts)


def render_profile(user: Optional[Dict[str, Any]], is_own_profile: bool = False) -> str:
    if user is None:
        return LOADING
    if not user:
        return "User not found\nThe user you're looking for doesn't exist or has been deleted."

    lines = [
        f"{user.get('postsCount') or 0} posts  "
        f"{user.get('followersCount') or 0} followers  "
        f"{user.get('followingCount') or 0} following",
        display_name(user),
    ]
    if user.get("bio"):
        lines.append(user["bio"])
    if user.get("website"):
        lines.append(user["website"])

    if is_own_profile:
        lines.append("[Edit profile]")
    else:
        lines.append("[Following]" if user.get("isFollowing") else "[Follow]")

    return "\n".join(lines)


def render_notifications(
    notifications: Optional[List[Dict[str, Any]]],
    now: Optional[datetime] = None
) -> str:
    if notifications is None:
        return LOADING
    if not notifications:
        return "No notifications yet"

    lines = []
    for notification in notifications:
        actor = notification["actor"]
        line = f"{actor.get('username')} {notification['message']} {time_ago(notification['createdAt'], now)}"
        if notification["type"] == "follow" and not actor.get("isFollowing"):
            line += " [Follow back]"
        lines.append(line)
    return "\n".join(lines)


def render_stories(stories: Optional[List[Dict[str, Any]]]) -> str:
    if stories is None:
        return LOADING
    if not stories:
        return "No stories"
    # Unviewed stories are marked so they stand out
    return "  ".join(
        story["user"].get("username") if story.get("hasViewed") else f"*{story['user'].get('username')}"
        for story in stories
    )


def render_search_results(results: Optional[Dict[str, Any]]) -> str:
    if results is None:
        return LOADING

    users = results.get("users") or []
    posts = results.get("posts") or []
    hashtags = results.get("hashtags") or []
    if not (users or posts or hashtags):
        return "No results found"

    lines = []
    if users:
        lines.append("Accounts")
        lines.extend(
            f"  @{user.get('username')} ({user.get('followersCount') or 0} followers)"
            for user in users
        )
    if hashtags:
        lines.append("Tags")
        lines.extend(
            f"  #{tag['name']} ({tag['postsCount']:,} posts)" for tag in hashtags
        )
    if posts:
        lines.append("Posts")
        lines.extend(f"  {post['caption']}" for post in posts)
    return "\n".join(lines)
