from datetime import datetime, timedelta, timezone

import pytest

from photofeed.models.follow import Follow
from photofeed.services.post_service import FEED_LIMIT

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

@pytest.mark.asyncio
async def test_feed_contains_own_and_followed_posts(make_user, make_post, client_for, test_db):
    me = await make_user("me")
    friend = await make_user("friend")
    stranger = await make_user("stranger")
    test_db.add(Follow(follower_id=me.id, following_id=friend.id))
    await test_db.commit()

    await make_post(me, "mine", created_at=BASE_TIME)
    await make_post(friend, "friend's", created_at=BASE_TIME + timedelta(minutes=1))
    await make_post(stranger, "stranger's", created_at=BASE_TIME + timedelta(minutes=2))

    client = await client_for(me)
    response = await client.get("/api/posts")

    assert response.status_code == 200
    captions = [post["caption"] for post in response.json()]
    assert captions == ["friend's", "mine"]

@pytest.mark.asyncio
async def test_feed_is_capped_and_newest_first(make_user, make_post, client_for):
    me = await make_user("prolific")
    for i in range(FEED_LIMIT + 5):
        await make_post(me, f"post {i}", created_at=BASE_TIME + timedelta(minutes=i))

    client = await client_for(me)
    data = (await client.get("/api/posts")).json()

    assert len(data) == FEED_LIMIT
    assert data[0]["caption"] == f"post {FEED_LIMIT + 4}"
    created = [post["createdAt"] for post in data]
    assert created == sorted(created, reverse=True)

@pytest.mark.asyncio
async def test_empty_feed(make_user, make_post, client_for):
    me = await make_user("newcomer")
    await make_post(await make_user("someone"))

    client = await client_for(me)
    response = await client.get("/api/posts")

    assert response.status_code == 200
    assert response.json() == []

@pytest.mark.asyncio
async def test_feed_requires_session(anonymous_client):
    response = await anonymous_client.get("/api/posts")

    assert response.status_code == 401

@pytest.mark.asyncio
async def test_stories_from_followed_users(make_user, client_for, test_db):
    me = await make_user("storyteller")
    followed = []
    for i in range(6):
        user = await make_user(
            f"friend{i}",
            profile_image_url=f"https://img.example.com/{i}.jpg" if i else None
        )
        test_db.add(Follow(
            follower_id=me.id,
            following_id=user.id,
            created_at=BASE_TIME + timedelta(minutes=i)
        ))
        followed.append(user)
    await test_db.commit()

    client = await client_for(me)
    response = await client.get("/api/stories")

    assert response.status_code == 200
    stories = response.json()
    assert len(stories) == 5
    assert [story["id"] for story in stories] == [f"story-{user.id}" for user in followed[:5]]
    assert [story["hasViewed"] for story in stories] == [False, False, False, True, True]
    assert stories[0]["imageUrl"] == ""
    assert stories[1]["imageUrl"] == "https://img.example.com/1.jpg"
    assert stories[0]["user"]["username"] == "friend0"

@pytest.mark.asyncio
async def test_no_stories_without_follows(make_user, client_for):
    client = await client_for(await make_user("hermit"))

    response = await client.get("/api/stories")

    assert response.json() == []
