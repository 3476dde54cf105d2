import base64
import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from photofeed.config import settings
from photofeed.models.post import Post
from photofeed.services.comment_service import CommentService
from photofeed.services.post_service import PostService
from photofeed.utils.rate_limit import limiter

@pytest.mark.asyncio
async def test_create_post(make_user, client_for, png_bytes, test_db):
    """Test creating a post from a multipart upload"""
    user = await make_user("poster")
    client: AsyncClient = await client_for(user)

    response = await client.post(
        "/api/posts",
        data={"caption": "Golden hour", "location": "Lisbon"},
        files={"image": ("sunset.png", png_bytes, "image/png")},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["caption"] == "Golden hour"
    assert data["location"] == "Lisbon"
    assert data["userId"] == user.id
    assert data["user"]["username"] == "poster"
    assert data["likesCount"] == 0
    assert data["commentsCount"] == 0
    assert data["isLiked"] is False
    assert data["isSaved"] is False
    assert data["imageUrl"] == "data:image/png;base64," + base64.b64encode(png_bytes).decode()

    count = await test_db.scalar(select(func.count()).select_from(Post))
    assert count == 1

@pytest.mark.asyncio
async def test_create_post_requires_image(make_user, client_for):
    client = await client_for(await make_user("noimage"))

    response = await client.post("/api/posts", data={"caption": "Where is my photo"})

    assert response.status_code == 400
    assert response.json() == {"message": "Image is required"}

@pytest.mark.asyncio
@pytest.mark.parametrize("caption", ["", "x" * 2201])
async def test_create_post_rejects_bad_caption(make_user, client_for, png_bytes, test_db, caption):
    client = await client_for(await make_user("badcaption"))

    response = await client.post(
        "/api/posts",
        data={"caption": caption},
        files={"image": ("a.png", png_bytes, "image/png")},
    )

    assert response.status_code == 400
    assert "message" in response.json()
    count = await test_db.scalar(select(func.count()).select_from(Post))
    assert count == 0

@pytest.mark.asyncio
async def test_create_post_accepts_longest_caption(make_user, client_for, png_bytes):
    client = await client_for(await make_user("longcaption"))
    caption = "x" * 2200

    response = await client.post(
        "/api/posts",
        data={"caption": caption},
        files={"image": ("a.png", png_bytes, "image/png")},
    )

    assert response.status_code == 201
    assert response.json()["caption"] == caption

@pytest.mark.asyncio
async def test_create_post_rejects_long_location(make_user, client_for, png_bytes):
    client = await client_for(await make_user("faraway"))

    response = await client.post(
        "/api/posts",
        data={"caption": "Somewhere", "location": "y" * 101},
        files={"image": ("a.png", png_bytes, "image/png")},
    )

    assert response.status_code == 400

@pytest.mark.asyncio
async def test_get_post_not_found(make_user, client_for):
    client = await client_for(await make_user("lost"))

    response = await client.get("/api/posts/999")

    assert response.status_code == 404
    assert response.json() == {"message": "Post not found"}

@pytest.mark.asyncio
async def test_get_post_with_non_numeric_id_is_bad_request(make_user, client_for):
    client = await client_for(await make_user("typo"))

    response = await client.get("/api/posts/abc")

    assert response.status_code == 400

@pytest.mark.asyncio
async def test_comments_count_ignores_preview_cap(make_user, make_post, make_comment, client_for, test_db):
    """commentsCount counts every comment even though only five are previewed"""
    author = await make_user("author")
    fan = await make_user("fan")
    post = await make_post(author)
    for i in range(7):
        await make_comment(fan, post, f"comment {i}")

    client = await client_for(author)
    response = await client.get(f"/api/posts/{post.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["commentsCount"] == 7
    assert await CommentService(test_db).count_comments(post.id) == 7
    assert len(data["comments"]) == 5
    # Newest first
    assert [c["content"] for c in data["comments"]] == [f"comment {i}" for i in range(6, 1, -1)]
    assert data["comments"][0]["user"]["username"] == "fan"

@pytest.mark.asyncio
async def test_get_post_reports_viewer_flags(make_user, make_post, client_for):
    author = await make_user("flagauthor")
    viewer = await make_user("flagviewer")
    post = await make_post(author)
    client = await client_for(viewer)

    await client.post(f"/api/posts/{post.id}/like")
    await client.post(f"/api/posts/{post.id}/save")

    data = (await client.get(f"/api/posts/{post.id}")).json()
    assert data["isLiked"] is True
    assert data["isSaved"] is True
    assert data["likesCount"] == 1

    author_client = await client_for(author)
    author_view = (await author_client.get(f"/api/posts/{post.id}")).json()
    assert author_view["isLiked"] is False
    assert author_view["isSaved"] is False
    assert author_view["likesCount"] == 1

@pytest.mark.asyncio
async def test_create_comment(make_user, make_post, client_for):
    author = await make_user("commentee")
    commenter = await make_user("commenter")
    post = await make_post(author)
    client = await client_for(commenter)

    response = await client.post(f"/api/posts/{post.id}/comments", json={"content": "Lovely light"})

    assert response.status_code == 201
    data = response.json()
    assert data["content"] == "Lovely light"
    assert data["postId"] == post.id
    assert data["user"]["username"] == "commenter"

@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "z" * 1001])
async def test_create_comment_validates_length(make_user, make_post, client_for, content):
    author = await make_user("strict")
    post = await make_post(author)
    client = await client_for(author)

    response = await client.post(f"/api/posts/{post.id}/comments", json={"content": content})

    assert response.status_code == 400

@pytest.mark.asyncio
async def test_comment_on_missing_post(make_user, client_for):
    client = await client_for(await make_user("ghostwriter"))

    response = await client.post("/api/posts/404/comments", json={"content": "Hello?"})

    assert response.status_code == 404

@pytest.mark.asyncio
async def test_user_posts_without_viewer_are_not_enriched(make_user, make_post, make_comment, test_db):
    author = await make_user("plain")
    post = await make_post(author)
    await make_comment(author, post)

    posts = await PostService(test_db).get_user_posts(author.id)

    assert len(posts) == 1
    assert posts[0].comments_count == 0
    assert posts[0].comments is None
    assert posts[0].is_liked is False

@pytest.fixture
def fresh_rate_limits():
    limiter.reset()
    yield
    limiter.reset()

@pytest.mark.asyncio
async def test_create_post_is_rate_limited(make_user, client_for, fresh_rate_limits):
    client = await client_for(await make_user("spammer"))

    for _ in range(settings.RATE_LIMIT_PER_MINUTE):
        response = await client.post("/api/posts", data={"caption": "again"})
        assert response.status_code == 400

    response = await client.post("/api/posts", data={"caption": "one too many"})

    assert response.status_code == 429
    assert "message" in response.json()
