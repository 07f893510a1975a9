"""
Review aggregation.

Every rating shown by the API is derived here from the rows the caller
fetched: a review's overall score is the mean of its five dimensions, and a
faculty's rating is the mean of its reviews' overall scores. Callers are
expected to pass approved reviews only.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from config import TOP_RATED_THRESHOLD, BLACKLIST_THRESHOLD
from schemas import FacultyStatsOut, FacultySummaryOut, ReviewOut, OwnReviewOut

RATING_DIMENSIONS = (
    "teaching_quality",
    "approachability",
    "clarity",
    "availability",
    "fairness",
)

ANONYMOUS = "Anonymous"

# ======================
# PER-REVIEW / PER-SET AVERAGES
# ======================


def review_overall(review) -> float:
    # an unset dimension counts as 0
    total = sum((getattr(review, dim, None) or 0) for dim in RATING_DIMENSIONS)
    return total / len(RATING_DIMENSIONS)


def average_rating(reviews: Iterable) -> float:
    reviews = list(reviews)
    if not reviews:
        return 0.0
    return sum(review_overall(r) for r in reviews) / len(reviews)


def dimension_averages(reviews: Iterable) -> Dict[str, float]:
    reviews = list(reviews)
    out: Dict[str, float] = {}
    for dim in RATING_DIMENSIONS:
        values = [getattr(r, dim) for r in reviews if getattr(r, dim, None) is not None]
        out[dim] = sum(values) / len(values) if values else 0.0
    return out

# ======================
# GROUPING
# ======================


def group_by_faculty(rows: Iterable) -> Dict[int, List]:
    by_faculty: Dict[int, List] = defaultdict(list)
    for row in rows:
        by_faculty[row.faculty_id].append(row)
    return by_faculty


def count_by_faculty(rows: Iterable) -> Dict[int, int]:
    counts: Dict[int, int] = defaultdict(int)
    for row in rows:
        counts[row.faculty_id] += 1
    return counts


def votes_by_faculty(votes: Iterable) -> Dict[int, Tuple[int, int]]:
    """Map faculty id to (upvotes, downvotes)."""
    up: Dict[int, int] = defaultdict(int)
    down: Dict[int, int] = defaultdict(int)
    for vote in votes:
        if vote.vote_type == "up":
            up[vote.faculty_id] += 1
        elif vote.vote_type == "down":
            down[vote.faculty_id] += 1
    return {fid: (up[fid], down[fid]) for fid in set(up) | set(down)}

# ======================
# FACULTY STATS & RANKINGS
# ======================


def build_faculty_stats(
    faculty: Iterable,
    reviews: Iterable,
    stars: Iterable = (),
    blacklist_votes: Iterable = (),
    faculty_votes: Iterable = (),
) -> List[FacultyStatsOut]:
    reviews_by_faculty = group_by_faculty(reviews)
    star_counts = count_by_faculty(stars)
    blacklist_counts = count_by_faculty(blacklist_votes)
    vote_counts = votes_by_faculty(faculty_votes)

    stats: List[FacultyStatsOut] = []
    for f in faculty:
        f_reviews = reviews_by_faculty.get(f.id, [])
        upvotes, downvotes = vote_counts.get(f.id, (0, 0))
        stats.append(FacultyStatsOut(
            id=f.id,
            name=f.name,
            department=f.department,
            faculty_id=f.faculty_id,
            photo_url=f.photo_url,
            average_rating=average_rating(f_reviews),
            review_count=len(f_reviews),
            star_count=star_counts.get(f.id, 0),
            blacklist_count=blacklist_counts.get(f.id, 0),
            upvotes=upvotes,
            downvotes=downvotes,
        ))
    return stats


def top_rated(stats: List[FacultyStatsOut], threshold: float = TOP_RATED_THRESHOLD) -> List[FacultyStatsOut]:
    rated = [s for s in stats if s.average_rating > threshold]
    return sorted(rated, key=lambda s: (-s.average_rating, s.name))


def community_favorites(stats: List[FacultyStatsOut]) -> List[FacultyStatsOut]:
    starred = [s for s in stats if s.star_count > 0]
    return sorted(starred, key=lambda s: (-s.star_count, s.name))


def blacklisted(stats: List[FacultyStatsOut], threshold: float = BLACKLIST_THRESHOLD) -> List[FacultyStatsOut]:
    # unreviewed faculty average 0 and must not show up here
    flagged = [s for s in stats if s.review_count > 0 and s.average_rating < threshold]
    return sorted(flagged, key=lambda s: (s.average_rating, s.name))

# ======================
# REVIEW OUTPUT
# ======================


def author_name(review) -> str:
    if review.is_anonymous:
        return ANONYMOUS
    author = getattr(review, "author", None)
    if author is not None and author.display_name:
        return author.display_name
    return ANONYMOUS


def review_to_out(review) -> ReviewOut:
    return ReviewOut(
        id=review.id,
        faculty_id=review.faculty_id,
        user_id=None if review.is_anonymous else review.user_id,
        author_name=author_name(review),
        content=review.content,
        teaching_quality=review.teaching_quality,
        approachability=review.approachability,
        clarity=review.clarity,
        availability=review.availability,
        fairness=review.fairness,
        overall=review_overall(review),
        is_anonymous=bool(review.is_anonymous),
        status=review.status,
        created_at=review.created_at,
    )


def own_review_to_out(review) -> OwnReviewOut:
    base = review_to_out(review).model_dump()
    faculty = getattr(review, "faculty", None)
    return OwnReviewOut(
        **base,
        faculty_name=faculty.name if faculty is not None else None,
        rejection_reason=review.rejection_reason,
    )

# ======================
# FACULTY REVIEW SUMMARY (Amazon-style)
# ======================


def summary_tone(avg: float) -> str:
    if avg >= 4.5:
        return "Students consistently rate this faculty as excellent with highly positive feedback."
    if avg >= 4.0:
        return "Students generally have a very good experience with this faculty."
    if avg >= 3.0:
        return "Feedback is mixed: some students are satisfied, while others see room for improvement."
    if avg > 0:
        return "Students often find this faculty challenging, with several critical comments."
    return "No clear trend from reviews yet."


def rating_breakdown(reviews: Iterable) -> Dict[int, int]:
    breakdown = {i: 0 for i in range(1, 6)}
    for r in reviews:
        stars = int(round(review_overall(r)))
        if 1 <= stars <= 5:
            breakdown[stars] += 1
    return breakdown


def build_faculty_summary(faculty, reviews: List) -> FacultySummaryOut:
    if not reviews:
        return FacultySummaryOut(
            faculty_id=faculty.id,
            faculty_name=faculty.name,
            avg_rating=0.0,
            count=0,
            summary="No student reviews yet. Be the first to share your experience.",
            breakdown={i: 0 for i in range(1, 6)},
            dimensions={dim: 0.0 for dim in RATING_DIMENSIONS},
            reviews=[],
        )

    avg = average_rating(reviews)
    return FacultySummaryOut(
        faculty_id=faculty.id,
        faculty_name=faculty.name,
        avg_rating=avg,
        count=len(reviews),
        summary=summary_tone(avg),
        breakdown=rating_breakdown(reviews),
        dimensions=dimension_averages(reviews),
        reviews=[
            review_to_out(r)
            for r in sorted(reviews, key=lambda x: x.created_at, reverse=True)
        ],
    )
