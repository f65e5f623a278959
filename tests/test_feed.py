# tests/test_feed.py
"""Tests for feed, profile and single-post assembly."""

from __future__ import annotations

from datetime import timedelta, timezone

import pytest

from picfeed.core.errors import NotFoundError
from picfeed.services.feed import FeedAssembler


@pytest.fixture()
def assembler(db_session) -> FeedAssembler:
    return FeedAssembler(db_session, comment_limit=3)


def test_latest_feed_returns_newest_page(assembler, test_user, make_post) -> None:
    """25 posts yield the 20 newest, each stamped with the caller's CSRF token."""
    posts = [make_post(test_user, minutes=i) for i in range(25)]

    feed = assembler.latest_feed(20, "csrf-abc")

    assert [view.id for view in feed] == [post.id for post in reversed(posts[5:])]
    assert all(view.csrf_token == "csrf-abc" for view in feed)
    assert all(view.user.id == test_user.id for view in feed)


def test_latest_feed_image_urls(assembler, test_user, make_post) -> None:
    jpeg = make_post(test_user, minutes=1, mime="image/jpeg")
    gif = make_post(test_user, minutes=2, mime="image/gif")

    urls = {view.id: view.image_url for view in assembler.latest_feed(20, "")}

    assert urls == {jpeg.id: f"/image/{jpeg.id}.jpg", gif.id: f"/image/{gif.id}.gif"}


def test_latest_feed_skips_banned_authors(
    assembler, test_user, make_user, make_post
) -> None:
    banned = make_user("spammer", banned=True)
    visible = make_post(test_user, minutes=1)
    make_post(banned, minutes=2)

    feed = assembler.latest_feed(20, "")

    assert [view.id for view in feed] == [visible.id]


def test_latest_feed_caps_comments_but_counts_all(
    assembler, test_user, other_user, make_post, make_comment
) -> None:
    post = make_post(test_user)
    for i in range(5):
        make_comment(post, other_user, minutes=i)

    (view,) = assembler.latest_feed(20, "")

    assert view.comment_count == 5
    assert len(view.comments) == 3
    assert view.comments[0].created_at > view.comments[-1].created_at


def test_latest_feed_keeps_comments_by_banned_users(
    assembler, test_user, make_user, make_post, make_comment
) -> None:
    banned = make_user("troll", banned=True)
    post = make_post(test_user)
    make_comment(post, banned, text="still here")

    (view,) = assembler.latest_feed(20, "")

    assert [comment.comment for comment in view.comments] == ["still here"]


def test_latest_feed_query_count_is_constant(
    assembler, make_user, make_post, make_comment, query_counter
) -> None:
    authors = [make_user() for _ in range(4)]
    for i in range(20):
        post = make_post(authors[i % 4], minutes=i)
        make_comment(post, authors[(i + 1) % 4], minutes=i)

    query_counter.reset()
    assembler.latest_feed(20, "")

    # posts+authors, comments, comment authors, comment counts
    assert len(query_counter.selects) == 4


def test_latest_feed_empty(assembler, query_counter) -> None:
    assert assembler.latest_feed(20, "") == []
    assert len(query_counter.selects) == 1


def test_feed_before_is_inclusive(assembler, test_user, make_post) -> None:
    posts = [make_post(test_user, minutes=i) for i in range(5)]
    cursor = posts[2].created_at

    page = assembler.feed_before(cursor, 20)

    assert [view.id for view in page] == [posts[2].id, posts[1].id, posts[0].id]


def test_feed_before_accepts_aware_cursor(assembler, test_user, make_post, base_time) -> None:
    posts = [make_post(test_user, minutes=i) for i in range(3)]
    cursor = (base_time + timedelta(minutes=1)).replace(tzinfo=timezone.utc)

    page = assembler.feed_before(cursor, 20)

    assert [view.id for view in page] == [posts[1].id, posts[0].id]


def test_feed_before_id_excludes_boundary(assembler, test_user, make_post) -> None:
    """Posts sharing the boundary timestamp are split by id."""
    older = make_post(test_user, minutes=0)
    tied_low = make_post(test_user, minutes=1)
    tied_high = make_post(test_user, minutes=1)

    page = assembler.feed_before(tied_high.created_at, 20, before_id=tied_high.id)

    assert [view.id for view in page] == [tied_low.id, older.id]


def test_feed_before_pages_without_gaps_or_repeats(assembler, test_user, make_post) -> None:
    posts = [make_post(test_user, minutes=i // 2) for i in range(11)]

    seen: list[int] = []
    page = assembler.latest_feed(4, "")
    while page:
        seen.extend(view.id for view in page)
        last = page[-1]
        page = assembler.feed_before(last.created_at, 4, before_id=last.id)

    assert sorted(seen) == sorted(post.id for post in posts)
    assert len(seen) == len(set(seen))


def test_feed_before_exhausted_returns_empty(assembler, test_user, make_post, base_time) -> None:
    make_post(test_user, minutes=10)

    assert assembler.feed_before(base_time, 20) == []


def test_profile_feed_counts(
    assembler, test_user, other_user, make_post, make_comment
) -> None:
    own_posts = [make_post(test_user, minutes=i) for i in range(3)]
    theirs = make_post(other_user, minutes=5)
    make_comment(own_posts[0], other_user)
    make_comment(own_posts[1], other_user)
    make_comment(theirs, test_user)

    profile = assembler.profile_feed("alice", 20, "tok")

    assert profile.user.account_name == "alice"
    assert [view.id for view in profile.posts] == [post.id for post in reversed(own_posts)]
    assert profile.post_count == 3
    assert profile.comment_count == 1
    assert profile.commented_count == 2
    assert all(view.csrf_token == "tok" for view in profile.posts)


def test_profile_feed_without_posts_skips_in_query(
    assembler, test_user, query_counter
) -> None:
    query_counter.reset()

    profile = assembler.profile_feed("alice", 20)

    assert profile.posts == ()
    assert profile.post_count == 0
    assert profile.commented_count == 0
    assert not any("comments.post_id IN" in stmt for stmt in query_counter.statements)


def test_profile_feed_banned_or_unknown(assembler, make_user) -> None:
    make_user("gone", banned=True)

    with pytest.raises(NotFoundError):
        assembler.profile_feed("gone", 20)
    with pytest.raises(NotFoundError):
        assembler.profile_feed("nobody", 20)


def test_resolve_post_returns_full_thread(
    assembler, test_user, other_user, make_post, make_comment
) -> None:
    post = make_post(test_user)
    for i in range(6):
        make_comment(post, other_user, minutes=i)

    view = assembler.resolve_post(post.id, "tok")

    assert view.id == post.id
    assert view.comment_count == 6
    assert len(view.comments) == 6
    assert view.csrf_token == "tok"


def test_resolve_post_hidden_or_missing(assembler, make_user, make_post) -> None:
    banned = make_user("hidden", banned=True)
    post = make_post(banned)

    with pytest.raises(NotFoundError):
        assembler.resolve_post(post.id, "")
    with pytest.raises(NotFoundError):
        assembler.resolve_post(12345, "")
