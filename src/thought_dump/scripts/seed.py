"""Populate the configured database with sample topics, posts and votes."""
from __future__ import annotations

import argparse
import logging
import random
import sys

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from thought_dump.core.logging import configure_logging
from thought_dump.core.settings import settings
from thought_dump.db.session import create_tables, session_scope
from thought_dump.models import Comment, CommentVote, Post, PostVote, Topic
from thought_dump.repositories.post_repo import PostRepository
from thought_dump.repositories.vote_repo import SubjectKind
from thought_dump.services.ledger import VoteType
from thought_dump.services.voting import VoteService

logger = logging.getLogger(__name__)

SAMPLE_TOPICS = [
    ("General Discussion", "general-discussion", "Open discussion about anything and everything"),
    ("Technology", "technology", "Discuss the latest in tech, programming, and innovation"),
    ("Philosophy", "philosophy", "Deep thoughts and philosophical discussions"),
    ("Books & Literature", "books-literature", "Share thoughts about books, stories, and writing"),
    ("Music", "music", "All things music - from classical to experimental"),
    ("Art & Design", "art-design", "Creative discussions about art, design, and aesthetics"),
    ("Science", "science", "Scientific discoveries, theories, and discussions"),
    ("Random Thoughts", "random-thoughts", "Shower thoughts, random observations, and musings"),
]

SAMPLE_POSTS = [
    (
        "general-discussion",
        "Platform Admin",
        "Welcome to Thought Dump! This is a place for anonymous, unfiltered discussion. "
        "Share your thoughts freely and vote on what resonates with you.",
    ),
    (
        "technology",
        "TechPhilosopher",
        "The intersection of AI and human creativity is fascinating. Are we witnessing "
        "the birth of a new form of collaborative intelligence?",
    ),
    (
        "philosophy",
        "DeepThinker",
        "If a tree falls in a forest and no one is around to hear it, does it make a sound? "
        "More importantly, does the question matter if we can't verify the answer?",
    ),
    (
        "books-literature",
        "BookWorm42",
        "Just finished reading 'The Midnight Library' - the concept of infinite possibilities "
        "and regret really hits different when you're questioning your life choices.",
    ),
    (
        "music",
        "BeatListener",
        "Lo-fi hip hop has become the unofficial soundtrack of productivity. There's something "
        "about those repetitive beats that just helps you focus.",
    ),
    (
        "art-design",
        "DesignMind",
        "Minimalism in design isn't just about removing elements - it's about finding the "
        "perfect balance between function and form.",
    ),
    (
        "science",
        "StarGazer",
        "The James Webb telescope images are changing how we think about the early universe. "
        "Every photo is like a time machine to cosmic history.",
    ),
    (
        "random-thoughts",
        "RandomBrain",
        "Why do we park in driveways and drive on parkways? English is weird.",
    ),
]


def reset_content(db: Session) -> None:
    """Delete every vote, comment, post and topic."""
    for model in (CommentVote, PostVote, Comment, Post, Topic):
        db.execute(delete(model))
    db.flush()
    db.expunge_all()
    logger.info("Cleared existing content")


def seed_topics(db: Session) -> dict[str, Topic]:
    """Create missing sample topics and return all of them keyed by slug."""
    topics: dict[str, Topic] = {}
    created = 0
    for name, slug, description in SAMPLE_TOPICS:
        topic = db.execute(select(Topic).where(Topic.slug == slug)).scalars().first()
        if topic is None:
            topic = Topic(name=name, slug=slug, description=description)
            db.add(topic)
            created += 1
        topics[slug] = topic
    db.flush()
    logger.info("Created %d topics (%d already present)", created, len(topics) - created)
    return topics


def seed_posts(db: Session, topics: dict[str, Topic], rng: random.Random) -> int:
    """Create sample posts in empty topics and cast synthetic votes on them.

    Votes go through :class:`VoteService` so counters, score and vote
    records stay in agreement.
    """
    posts = PostRepository(db)
    votes = VoteService(db)
    created = 0
    for slug, nickname, content in SAMPLE_POSTS:
        topic = topics[slug]
        if topic.post_count > 0:
            continue
        post = posts.create(content=content, topic=topic, author_nickname=nickname)
        created += 1

        for i in range(rng.randint(1, 10)):
            votes.cast_vote(SubjectKind.POST, post.id, f"seed-up-{i}-{post.id}", VoteType.UPVOTE)
        for i in range(rng.randint(0, 2)):
            votes.cast_vote(SubjectKind.POST, post.id, f"seed-down-{i}-{post.id}", VoteType.DOWNVOTE)
    logger.info("Created %d sample posts", created)
    return created


def seed(db: Session, *, reset: bool = False, rng_seed: int | None = None) -> int:
    """Seed sample content; returns the number of posts created."""
    if reset:
        reset_content(db)
    topics = seed_topics(db)
    return seed_posts(db, topics, random.Random(rng_seed))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the database with sample content")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete all existing topics, posts, comments and votes first.",
    )
    parser.add_argument(
        "--rng-seed",
        type=int,
        default=None,
        help="Seed for the synthetic vote counts.",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    create_tables()
    try:
        with session_scope() as db:
            seed(db, reset=args.reset, rng_seed=args.rng_seed)
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)
    logger.info("Database seeded successfully")


if __name__ == "__main__":
    main()
