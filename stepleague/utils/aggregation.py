"""
Submission deduplication and per-identity aggregation.

Upstream data may hold more than one row for the same (identity, date), e.g.
legacy per-league submissions. Rows are collapsed to one per (identity, date)
before folding so a day is never counted twice.

Aggregation works the same for real users and proxy members; the identity
type on each row keeps them apart.
"""

from dataclasses import replace
from functools import reduce
from typing import Dict, Iterable, List, Sequence, Tuple

from stepleague.data_models.leaderboard import Identity, SubmissionRow, UserStats


def _prefer(existing: SubmissionRow, candidate: SubmissionRow) -> SubmissionRow:
    """Pick the row that counts for a day: higher steps first, then the verified row."""
    if candidate.steps > existing.steps:
        return candidate
    if candidate.steps == existing.steps and candidate.verified and not existing.verified:
        return candidate
    return existing


def deduplicate_submissions(rows: Iterable[SubmissionRow]) -> List[SubmissionRow]:
    """
    Collapse rows to at most one per (identity, date).

    Output keeps the order in which each (identity, date) key was first seen,
    so callers that feed rows in a stable order get a stable result.
    """
    chosen: Dict[Tuple[Identity, object], SubmissionRow] = {}
    for row in rows:
        key = (row.identity, row.for_date)
        existing = chosen.get(key)
        chosen[key] = row if existing is None else _prefer(existing, row)
    return list(chosen.values())


def _fold_row(stats: UserStats, row: SubmissionRow) -> UserStats:
    """Return new stats with ``row``'s counters added; ``steps_by_date`` is left to the caller."""
    return replace(
        stats,
        total_steps=stats.total_steps + max(row.steps or 0, 0),
        verified_days=stats.verified_days + (1 if row.verified else 0),
        unverified_days=stats.unverified_days + (0 if row.verified else 1),
    )


def summarize_rows(identity: Identity, rows: Sequence[SubmissionRow]) -> UserStats:
    """
    Fold one identity's deduplicated rows into fresh stats.

    Expects at most one row per date. The per-date map is built once.
    """
    stats = reduce(_fold_row, rows, UserStats(identity=identity))
    return replace(stats, steps_by_date={row.for_date: max(row.steps or 0, 0) for row in rows})


def aggregate_submissions(rows: Iterable[SubmissionRow]) -> Dict[Identity, UserStats]:
    """
    Deduplicate raw rows and fold them into per-identity stats.

    Identities without any qualifying row are absent from the result. Result
    order follows the first appearance of each identity in ``rows``.
    """
    grouped: Dict[Identity, List[SubmissionRow]] = {}
    for row in deduplicate_submissions(rows):
        grouped.setdefault(row.identity, []).append(row)

    return {
        identity: summarize_rows(identity, identity_rows)
        for identity, identity_rows in grouped.items()
    }
