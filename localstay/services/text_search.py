"""
Token-based text search over persisted records.

Each searchable model keeps an inverted index table of (record, term,
frequency) rows. Indexing tokenizes the configured text fields; searching
tokenizes the query the same way, matches any term, and ranks records by
the summed frequency of the matched terms.
"""
import logging
import re
from collections import Counter

from sqlalchemy import func
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

MAX_TERM_LENGTH = 64

_WORD = re.compile(r"\w+")

STOP_WORDS = frozenset(
    """
    a an and are as at be but by for from has have he her his i in is it its
    of on or our she that the their them they this to was we were will with
    you your
    """.split()
)


def tokenize(text: str | None) -> list[str]:
    if not text:
        return []
    terms = []
    for word in _WORD.findall(text.casefold()):
        if word in STOP_WORDS or word == "_" * len(word):
            continue
        terms.append(word[:MAX_TERM_LENGTH])
    return terms


def term_frequencies(*texts: str | None) -> Counter:
    counts: Counter = Counter()
    for text in texts:
        counts.update(tokenize(text))
    return counts


def build_terms(term_model, *texts: str | None) -> list:
    """Fresh index rows for a record whose indexed text is `texts`."""
    return [term_model(term=term, frequency=count) for term, count in term_frequencies(*texts).items()]


def search(db: Session, model, term_model, owner_column, query: str, limit: int) -> list:
    """
    Records matching at least one query term, best match first.
    Ties go to the most recently created record.
    """
    terms = sorted(set(tokenize(query)))
    if not terms:
        return []
    logger.debug("Searching %s for terms %s", model.__tablename__, terms)
    scores = (
        db.query(owner_column.label("owner_id"), func.sum(term_model.frequency).label("score"))
        .filter(term_model.term.in_(terms))
        .group_by(owner_column)
        .subquery()
    )
    return (
        db.query(model)
        .join(scores, scores.c.owner_id == model.id)
        .order_by(scores.c.score.desc(), model.created_at.desc(), model.id)
        .limit(limit)
        .all()
    )
