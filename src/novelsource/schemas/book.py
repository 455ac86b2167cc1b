from typing import NotRequired, TypedDict


class ChapterItem(TypedDict):
    """One entry of a book's chapter list.

    The position of an item in the list yielded by the catalog stage is the
    chapter order; there is no separate index field.

    Attributes:
        title: Title of the chapter.
        chapter_url: URL of the chapter page.
        is_vip: Whether the chapter is behind a paywall, when known.
        update_time: Update timestamp as provided by the site, when known.
    """

    title: str
    chapter_url: str
    is_vip: NotRequired[bool]
    update_time: NotRequired[str]


class CacheEntry(TypedDict):
    """Cached chapter text.

    Attributes:
        content: Chapter text, paragraphs separated by blank lines.
        chapter_title: Title of the chapter.
    """

    content: str
    chapter_title: str
