from typing import TypedDict


class RawSearchResult(TypedDict):
    """Fields extracted from one search-result row, before aggregation.

    Attributes:
        title: Book title.
        author: Author name.
        cover_url: Absolute (or page-relative) URL of the cover image.
        intro: Short summary returned by the site.
        detail_url: URL of the book's detail page.
    """

    title: str
    author: str
    cover_url: str
    intro: str
    detail_url: str


class MergedSource(TypedDict):
    """One source that returned a given logical book.

    Attributes:
        source_id: Identifier of the book source.
        source_name: Display name of the book source.
        detail_url: Detail page of the book on that source.
    """

    source_id: str
    source_name: str
    detail_url: str


class SearchResult(RawSearchResult):
    """Aggregated search result shown to the user.

    Attributes:
        id: Synthetic identifier, random per generation.
        source_id: Source that first returned this book.
        source_name: Display name of that source.
        merged_sources: Every source known to carry this book, in
            discovery order.
    """

    id: str
    source_id: str
    source_name: str
    merged_sources: list[MergedSource]
