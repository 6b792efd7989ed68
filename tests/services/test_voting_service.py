# mypy: ignore-errors
# tests/services/test_voting_service.py
"""Tests for casting votes against the database."""

import math
from datetime import timedelta

import pytest
from sqlalchemy import update

from thought_dump.core.errors import ConsistencyError, NotFoundError, ValidationError
from thought_dump.models import Post
from thought_dump.repositories.vote_repo import SubjectKind, VoteRepository
from thought_dump.services.ledger import RecordAction, VoteType
from thought_dump.services.scoring import calculate_score
from thought_dump.services.voting import VoteService

UP = VoteType.UPVOTE
DOWN = VoteType.DOWNVOTE


@pytest.fixture()
def service(db_session, fixed_now):
    return VoteService(db_session, clock=lambda: fixed_now)


@pytest.fixture()
def fresh_post(make_post, test_topic, fixed_now):
    return make_post(test_topic, "Scored post", created_at=fixed_now)


def _assert_conserved(db_session, kind, subject) -> None:
    db_session.refresh(subject)
    ledger = VoteRepository(db_session, kind).count_votes(subject.id)
    assert (subject.upvotes, subject.downvotes) == ledger


def test_first_upvote(service, db_session, fresh_post) -> None:
    outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", UP)

    assert (outcome.upvotes, outcome.downvotes) == (1, 0)
    assert outcome.vote is UP
    assert outcome.transition.action is RecordAction.CREATE
    assert outcome.score == pytest.approx(math.log(2) / 2 ** 1.8)
    _assert_conserved(db_session, SubjectKind.POST, fresh_post)


def test_repeat_vote_withdraws(service, db_session, fresh_post) -> None:
    service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", UP)
    outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", UP)

    assert (outcome.upvotes, outcome.downvotes) == (0, 0)
    assert outcome.vote is None
    assert outcome.score == 0.0
    assert service.current_vote(SubjectKind.POST, fresh_post.id, "voter-a") is None
    _assert_conserved(db_session, SubjectKind.POST, fresh_post)


def test_flip_updates_record_in_place(service, db_session, fresh_post) -> None:
    service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", DOWN)
    outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", UP)

    assert (outcome.upvotes, outcome.downvotes) == (1, 0)
    assert outcome.transition.action is RecordAction.UPDATE
    assert outcome.transition.net_delta == 2
    assert service.current_vote(SubjectKind.POST, fresh_post.id, "voter-a") is UP
    _assert_conserved(db_session, SubjectKind.POST, fresh_post)


def test_votes_from_different_voters_accumulate(service, db_session, fresh_post) -> None:
    for voter in ("a", "b", "c"):
        service.cast_vote(SubjectKind.POST, fresh_post.id, voter, UP)
    outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, "d", DOWN)

    assert (outcome.upvotes, outcome.downvotes) == (3, 1)
    assert outcome.score == pytest.approx(0.75 * math.log(5) / 2 ** 1.8)
    _assert_conserved(db_session, SubjectKind.POST, fresh_post)


def test_score_is_stored_on_subject(service, db_session, fresh_post, fixed_now) -> None:
    outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", UP)
    db_session.refresh(fresh_post)
    assert fresh_post.score == pytest.approx(outcome.score)
    assert fresh_post.score == pytest.approx(calculate_score(1, 0, fixed_now, fixed_now))


def test_score_uses_subject_age(db_session, make_post, test_topic, fixed_now) -> None:
    older = make_post(test_topic, "Old post", created_at=fixed_now - timedelta(hours=10))
    outcome = VoteService(db_session, clock=lambda: fixed_now).cast_vote(
        SubjectKind.POST, older.id, "voter-a", UP
    )
    assert outcome.score == pytest.approx(math.log(2) / 12 ** 1.8)


def test_toggle_round_trip_restores_counters(service, db_session, fresh_post) -> None:
    service.cast_vote(SubjectKind.POST, fresh_post.id, "other", DOWN)
    db_session.refresh(fresh_post)
    before = (fresh_post.upvotes, fresh_post.downvotes)

    for vote in (UP, DOWN):
        service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", vote)
        outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", vote)
        assert (outcome.upvotes, outcome.downvotes) == before


def test_scenario_three_voters(service, db_session, fresh_post) -> None:
    steps = [
        ("a", UP, (1, 0)),
        ("b", UP, (2, 0)),
        ("c", DOWN, (2, 1)),
        ("a", UP, (1, 1)),
        ("c", UP, (2, 0)),
        ("b", DOWN, (1, 1)),
    ]
    for voter, vote, expected in steps:
        outcome = service.cast_vote(SubjectKind.POST, fresh_post.id, voter, vote)
        assert (outcome.upvotes, outcome.downvotes) == expected
        _assert_conserved(db_session, SubjectKind.POST, fresh_post)


def test_comment_votes_use_comment_ledger(service, db_session, test_comment, fresh_post) -> None:
    outcome = service.cast_vote(SubjectKind.COMMENT, test_comment.id, "voter-a", DOWN)
    assert (outcome.upvotes, outcome.downvotes) == (0, 1)
    assert outcome.score == 0.0
    _assert_conserved(db_session, SubjectKind.COMMENT, test_comment)
    assert service.current_vote(SubjectKind.POST, fresh_post.id, "voter-a") is None


def test_missing_subject_raises_not_found(service) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        service.cast_vote(SubjectKind.POST, 9999, "voter-a", UP)
    assert exc_info.value.code == "POST_NOT_FOUND"

    with pytest.raises(NotFoundError) as exc_info:
        service.cast_vote(SubjectKind.COMMENT, 9999, "voter-a", UP)
    assert exc_info.value.code == "COMMENT_NOT_FOUND"


def test_moderated_subject_cannot_be_voted(service, make_post, test_topic) -> None:
    hidden = make_post(test_topic, "Hidden", is_moderated=True)
    with pytest.raises(NotFoundError):
        service.cast_vote(SubjectKind.POST, hidden.id, "voter-a", UP)


def test_invalid_vote_type_changes_nothing(service, db_session, fresh_post) -> None:
    with pytest.raises(ValidationError):
        service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", "meh")
    db_session.refresh(fresh_post)
    assert (fresh_post.upvotes, fresh_post.downvotes) == (0, 0)
    assert VoteRepository(db_session, SubjectKind.POST).find_vote(fresh_post.id, "voter-a") is None


def test_negative_counter_raises_consistency_error(service, db_session, fresh_post) -> None:
    service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", DOWN)
    db_session.execute(update(Post).where(Post.id == fresh_post.id).values(downvotes=0))

    with pytest.raises(ConsistencyError) as exc_info:
        service.cast_vote(SubjectKind.POST, fresh_post.id, "voter-a", DOWN)
    assert exc_info.value.status_code == 500


def test_two_voter_scenario_scores(db_session, make_post, test_topic, fixed_now) -> None:
    post = make_post(test_topic, "Five hours old", created_at=fixed_now - timedelta(hours=5))
    service = VoteService(db_session, clock=lambda: fixed_now)

    first = service.cast_vote(SubjectKind.POST, post.id, "voter-a", UP)
    assert (first.upvotes, first.downvotes) == (1, 0)
    assert first.score > 0

    second = service.cast_vote(SubjectKind.POST, post.id, "voter-b", DOWN)
    assert (second.upvotes, second.downvotes) == (1, 1)
    assert second.score == pytest.approx(0.5 * math.log(3) / 7 ** 1.8)

    withdrawn = service.cast_vote(SubjectKind.POST, post.id, "voter-a", UP)
    assert (withdrawn.upvotes, withdrawn.downvotes) == (0, 1)
    assert withdrawn.vote is None
    assert withdrawn.score == 0.0
    _assert_conserved(db_session, SubjectKind.POST, post)


def test_comment_on_moderated_post_cannot_be_voted(
    service, db_session, make_post, make_comment, test_topic
) -> None:
    post = make_post(test_topic, "Soon hidden")
    comment = make_comment(post, "Still here")
    db_session.execute(update(Post).where(Post.id == post.id).values(is_moderated=True))

    with pytest.raises(NotFoundError) as exc_info:
        service.cast_vote(SubjectKind.COMMENT, comment.id, "voter-a", UP)
    assert exc_info.value.code == "COMMENT_NOT_FOUND"
    assert VoteRepository(db_session, SubjectKind.COMMENT).find_vote(comment.id, "voter-a") is None
