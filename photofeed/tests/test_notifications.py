from datetime import datetime, timedelta, timezone

import pytest

from photofeed.models.comment import Comment
from photofeed.models.follow import Follow
from photofeed.models.like import Like
from photofeed.schemas.notification_schema import NotificationType
from photofeed.services.notification_service import comment_excerpt

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

def test_only_like_comment_and_follow_notifications_exist():
    assert {kind.value for kind in NotificationType} == {"like", "comment", "follow"}

def test_comment_excerpt():
    assert comment_excerpt("Short one") == "Short one"
    assert comment_excerpt("x" * 20) == "x" * 20
    assert comment_excerpt("This comment is clearly too long") == "This comment is clea..."

@pytest.mark.asyncio
async def test_notifications_from_likes_follows_and_comments(make_user, make_post, client_for, test_db):
    me = await make_user("celebrity")
    fan = await make_user("fan")
    follower = await make_user("follower")
    post = await make_post(me, image_url="data:image/png;base64,QUJD")

    test_db.add_all([
        Like(user_id=fan.id, post_id=post.id, created_at=BASE_TIME),
        Like(user_id=me.id, post_id=post.id, created_at=BASE_TIME + timedelta(minutes=1)),
        Follow(follower_id=follower.id, following_id=me.id, created_at=BASE_TIME + timedelta(minutes=2)),
        Comment(
            user_id=fan.id,
            post_id=post.id,
            content="What a wonderful photograph",
            created_at=BASE_TIME + timedelta(minutes=3)
        ),
    ])
    await test_db.commit()

    client = await client_for(me)
    response = await client.get("/api/notifications")

    assert response.status_code == 200
    notifications = response.json()
    assert [n["type"] for n in notifications] == ["comment", "follow", "like"]

    comment, follow, like = notifications
    assert comment["message"] == 'commented on your post: "What a wonderful pho..."'
    assert comment["actor"]["username"] == "fan"
    assert comment["postId"] == post.id
    assert comment["postImageUrl"] == "data:image/png;base64,QUJD"

    assert follow["id"] == f"follow-{follower.id}"
    assert follow["message"] == "started following you."
    assert follow["actor"]["isFollowing"] is False

    assert like["id"] == f"like-{post.id}-{fan.id}"
    assert like["message"] == "liked your photo."

    assert all(n["isRead"] is False for n in notifications)

@pytest.mark.asyncio
async def test_follow_notification_reports_follow_back(make_user, client_for, test_db):
    me = await make_user("mutual")
    friend = await make_user("friendly")
    test_db.add_all([
        Follow(follower_id=friend.id, following_id=me.id),
        Follow(follower_id=me.id, following_id=friend.id),
    ])
    await test_db.commit()

    client = await client_for(me)
    notifications = (await client.get("/api/notifications")).json()

    assert len(notifications) == 1
    assert notifications[0]["actor"]["isFollowing"] is True

@pytest.mark.asyncio
async def test_only_recent_followers_are_reported(make_user, client_for, test_db):
    me = await make_user("famous")
    for i in range(5):
        follower = await make_user(f"admirer{i}")
        test_db.add(Follow(
            follower_id=follower.id,
            following_id=me.id,
            created_at=BASE_TIME + timedelta(minutes=i)
        ))
    await test_db.commit()

    client = await client_for(me)
    notifications = (await client.get("/api/notifications")).json()

    assert [n["actor"]["username"] for n in notifications] == ["admirer4", "admirer3", "admirer2"]

@pytest.mark.asyncio
async def test_no_notifications(make_user, client_for):
    client = await client_for(await make_user("quiet"))

    response = await client.get("/api/notifications")

    assert response.status_code == 200
    assert response.json() == []
