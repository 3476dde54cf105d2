from typing import List

from photofeed.schemas.explore_schema import HashtagTrending

_PREVIEW = "https://images.unsplash.com/photo-{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=100&h=100"

# There is no hashtag table; the explore page shows this fixed list
TRENDING_HASHTAGS = [
    HashtagTrending(
        id="hashtag-1",
        name="summervibes",
        posts_count=24569,
        preview_images=[
            _PREVIEW.format("1459749411175-04bf5292ceea"),
            _PREVIEW.format("1516542076529-1ea3854896f2"),
            _PREVIEW.format("1506748686214-e9df14d4d9d0"),
        ],
    ),
    HashtagTrending(
        id="hashtag-2",
        name="musicfestival",
        posts_count=18924,
        preview_images=[
            _PREVIEW.format("1501612780327-45045538702b"),
            _PREVIEW.format("1459749411175-04bf5292ceea"),
            _PREVIEW.format("1506748686214-e9df14d4d9d0"),
        ],
    ),
    HashtagTrending(
        id="hashtag-3",
        name="digitalart",
        posts_count=15738,
        preview_images=[
            _PREVIEW.format("1516542076529-1ea3854896f2"),
            _PREVIEW.format("1510915228340-29c85a43dcfe"),
            _PREVIEW.format("1555421689-3f034debb7a6"),
        ],
    ),
    HashtagTrending(
        id="hashtag-4",
        name="minimalist",
        posts_count=10246,
        preview_images=[
            _PREVIEW.format("1510915228340-29c85a43dcfe"),
            _PREVIEW.format("1555421689-3f034debb7a6"),
            _PREVIEW.format("1515886657613-9f3515b0c78f"),
        ],
    ),
    HashtagTrending(
        id="hashtag-5",
        name="neonlights",
        posts_count=8452,
        preview_images=[
            _PREVIEW.format("1459749411175-04bf5292ceea"),
            _PREVIEW.format("1501612780327-45045538702b"),
            _PREVIEW.format("1527251672045-a80241b3f574"),
        ],
    ),
    HashtagTrending(
        id="hashtag-6",
        name="workspace",
        posts_count=6385,
        preview_images=[
            _PREVIEW.format("1516542076529-1ea3854896f2"),
            _PREVIEW.format("1515886657613-9f3515b0c78f"),
            _PREVIEW.format("1510915228340-29c85a43dcfe"),
        ],
    ),
]

class ExploreService:
    def get_trending_hashtags(self) -> List[HashtagTrending]:
        return [hashtag.model_copy(deep=True) for hashtag in TRENDING_HASHTAGS]

    def search_hashtags(self, query: str) -> List[HashtagTrending]:
        """Hashtags whose name contains the query, ignoring case"""
        needle = query.lower()
        return [
            hashtag for hashtag in self.get_trending_hashtags()
            if needle in hashtag.name.lower()
        ]
