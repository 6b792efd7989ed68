"""In-memory feed ordering for already-fetched pages.

Toggling between chronological and trending views re-sorts the items the
client already holds instead of refetching them. ``FeedState`` is an
immutable container; every reducer returns a new state with the sorted
view re-derived from ``all_items``. Comments are held per post and always
kept newest first.

Trending here ranks by raw net votes (``upvotes - downvotes``) with newer
items winning ties. This intentionally differs from the server-side
trending order, which uses the stored decayed score.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any, Protocol, Self, TypeVar

from thought_dump.db.time import as_utc


class FeedMode(StrEnum):
    """Display order requested by the client."""

    CHRONOLOGICAL = "chronological"
    TRENDING = "trending"


class FeedItem(Protocol):
    """Minimal shape of a sortable post or comment."""

    id: int
    created_at: datetime
    upvotes: int
    downvotes: int

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = False) -> Self: ...


ItemT = TypeVar("ItemT", bound=FeedItem)


def _created_key(item: FeedItem) -> float:
    return as_utc(item.created_at).timestamp()


def sort_feed(items: Iterable[ItemT], mode: FeedMode) -> list[ItemT]:
    """Return ``items`` ordered for ``mode``.

    Python's sort is stable, so items with equal keys keep their input order.
    """
    if mode is FeedMode.TRENDING:
        return sorted(
            items,
            key=lambda item: (item.upvotes - item.downvotes, _created_key(item)),
            reverse=True,
        )
    return sorted(items, key=_created_key, reverse=True)


@dataclass(frozen=True)
class FeedState:
    """Snapshot of the fetched items and the derived display order."""

    all_items: tuple[Any, ...] = ()
    items: tuple[Any, ...] = ()
    mode: FeedMode = FeedMode.CHRONOLOGICAL
    # Comments held per post id, newest first.
    comments: Mapping[int, tuple[Any, ...]] = field(default_factory=dict)

    def _with_items(self, all_items: Sequence[Any], mode: FeedMode | None = None) -> FeedState:
        new_mode = mode or self.mode
        return replace(
            self,
            all_items=tuple(all_items),
            items=tuple(sort_feed(all_items, new_mode)),
            mode=new_mode,
        )

    def _with_comments(self, post_id: int, comments: Iterable[Any]) -> FeedState:
        return replace(self, comments={**self.comments, post_id: tuple(comments)})


def set_all_items(state: FeedState, items: Sequence[FeedItem]) -> FeedState:
    """Replace the fetched items, e.g. after loading the first page."""
    return state._with_items(items)


def add_items(state: FeedState, items: Sequence[FeedItem]) -> FeedState:
    """Append a further page of items."""
    return state._with_items((*state.all_items, *items))


def set_feed_mode(state: FeedState, mode: FeedMode | str) -> FeedState:
    """Switch display order without touching the fetched items."""
    return state._with_items(state.all_items, FeedMode(mode))


def apply_vote(
    state: FeedState,
    subject_id: int,
    *,
    upvotes: int,
    downvotes: int,
    score: float,
) -> FeedState:
    """Apply server-confirmed vote totals to one item and re-sort.

    Only called with totals returned by the vote endpoint; a failed vote
    leaves the state untouched.
    """
    updated = [
        item.model_copy(update={"upvotes": upvotes, "downvotes": downvotes, "score": score})
        if item.id == subject_id
        else item
        for item in state.all_items
    ]
    return state._with_items(updated)


def increment_comment_count(state: FeedState, post_id: int) -> FeedState:
    """Bump ``comment_count`` on a post after a comment was created."""
    updated = [
        item.model_copy(update={"comment_count": getattr(item, "comment_count", 0) + 1})
        if item.id == post_id
        else item
        for item in state.all_items
    ]
    return state._with_items(updated)


def set_comments(state: FeedState, post_id: int, comments: Sequence[FeedItem]) -> FeedState:
    """Replace the comments held for ``post_id``, newest first."""
    return state._with_comments(post_id, sort_feed(comments, FeedMode.CHRONOLOGICAL))


def add_comment(state: FeedState, post_id: int, comment: FeedItem) -> FeedState:
    """Store a newly created comment and bump the post's ``comment_count``."""
    held = state.comments.get(post_id, ())
    state = state._with_comments(post_id, sort_feed((comment, *held), FeedMode.CHRONOLOGICAL))
    return increment_comment_count(state, post_id)


def apply_comment_vote(
    state: FeedState,
    post_id: int,
    comment_id: int,
    *,
    upvotes: int,
    downvotes: int,
    score: float,
) -> FeedState:
    """Apply server-confirmed vote totals to one held comment.

    Comments stay newest first, so their order does not change.
    """
    held = state.comments.get(post_id)
    if held is None:
        return state
    updated = [
        comment.model_copy(update={"upvotes": upvotes, "downvotes": downvotes, "score": score})
        if comment.id == comment_id
        else comment
        for comment in held
    ]
    return state._with_comments(post_id, updated)


@dataclass
class FeedStore:
    """Holder that swaps in each new :class:`FeedState`.

    Passed explicitly to whatever renders the feed; there is no module-level
    instance.
    """

    state: FeedState = field(default_factory=FeedState)

    def dispatch(self, reducer: Any, *args: Any, **kwargs: Any) -> FeedState:
        self.state = reducer(self.state, *args, **kwargs)
        return self.state
