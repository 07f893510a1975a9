import logging
import random
from typing import List, Optional

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import (
    CORS_ORIGINS, LOG_LEVEL,
    FACULTY_REQUIRE_APPROVAL, REVIEWS_REQUIRE_APPROVAL, COMMENTS_REQUIRE_APPROVAL,
    FACULTY_POINTS, REVIEW_POINTS, COMMENT_POINTS,
    REVIEW_MAX_LENGTH, COMMENT_MAX_LENGTH, LEADERBOARD_SIZE,
)
from models import (
    Profile, Faculty, Review, Comment, CommentVote, FacultyVote, FacultyStar, BlacklistVote,
    STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED,
    COMMENT_VOTE_TYPES, FACULTY_VOTE_TYPES,
    get_db,
)
from schemas import (
    ProfileOut, ProfileUpdateIn, ProfileDetailOut, LeaderboardEntry, LeaderboardOut,
    FacultyIn, FacultyUpdateIn, FacultyOut, FacultyCreateOut, FacultyDetailOut,
    FacultyStatsOut, TopFacultyOut, FacultyCountsOut, FacultyVoteIn,
    ReviewIn, ReviewSubmitOut, OwnReviewOut, FacultySummaryOut,
    CommentIn, CommentOut, CommentVoteIn, CommentVoteOut,
    RejectIn, PendingOut,
)
from security import get_current_user, require_admin, is_admin, get_profile
import ratings

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Faculty Review API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,   # "*" by default; restrict in prod
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception in %s %s: %s",
        request.method, request.url.path, exc,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# ======================
# HELPERS
# ======================


def approved_faculty_query(db: Session):
    return db.query(Faculty).filter(Faculty.approved.is_(True))


def approved_reviews_query(db: Session):
    return db.query(Review).filter(Review.status == STATUS_APPROVED)


def get_faculty_or_404(db: Session, faculty_id: int) -> Faculty:
    faculty = db.query(Faculty).filter(Faculty.id == faculty_id).first()
    if not faculty:
        raise HTTPException(status_code=404, detail="Faculty not found")
    return faculty


def get_visible_faculty(db: Session, faculty_id: int, user: Profile) -> Faculty:
    faculty = get_faculty_or_404(db, faculty_id)
    if not faculty.approved and faculty.created_by != user.user_id and not is_admin(db, user):
        raise HTTPException(status_code=404, detail="Faculty not found")
    return faculty


def clean_courses(courses: Optional[List[str]]) -> Optional[List[str]]:
    if courses is None:
        return None
    cleaned = [c.strip() for c in courses if c and c.strip()]
    return cleaned or None


def validate_review(review: ReviewIn):
    ratings_set = all(1 <= getattr(review, dim) <= 5 for dim in ratings.RATING_DIMENSIONS)
    content = review.content.strip()
    if not ratings_set or not content:
        raise HTTPException(status_code=400, detail="Please fill in all ratings and write a review")
    if len(content) > REVIEW_MAX_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Review must be at most {REVIEW_MAX_LENGTH} characters",
        )


def reward(db: Session, item, user_id: str, points: int) -> int:
    """
    Credit the author of a published faculty/review/comment, once per item.
    Returns the points actually granted.
    """
    if item.rewarded:
        return 0
    profile = get_profile(db, user_id)
    if profile is None:
        return 0
    profile.points = (profile.points or 0) + points
    item.rewarded = True
    db.add(profile)
    return points


def upsert_review(db: Session, faculty: Faculty, user: Profile, body: ReviewIn):
    existing = (
        db.query(Review)
        .filter(Review.user_id == user.user_id, Review.faculty_id == faculty.id)
        .first()
    )
    status_value = STATUS_PENDING if REVIEWS_REQUIRE_APPROVAL else STATUS_APPROVED
    values = {dim: getattr(body, dim) for dim in ratings.RATING_DIMENSIONS}
    content = body.content.strip()

    if existing:
        for key, value in values.items():
            setattr(existing, key, value)
        existing.content = content
        existing.is_anonymous = body.is_anonymous
        existing.status = status_value
        existing.rejection_reason = None
        return existing, False

    review = Review(
        user_id=user.user_id,
        faculty_id=faculty.id,
        content=content,
        is_anonymous=body.is_anonymous,
        status=status_value,
        **values,
    )
    db.add(review)
    return review, True


def comment_to_out(comment: Comment) -> CommentOut:
    author = comment.author
    return CommentOut(
        id=comment.id,
        review_id=comment.review_id,
        user_id=comment.user_id,
        author_name=(author.display_name if author and author.display_name else ratings.ANONYMOUS),
        avatar_url=author.avatar_url if author else None,
        content=comment.content,
        likes=comment.likes or 0,
        dislikes=comment.dislikes or 0,
        status=comment.status,
        created_at=comment.created_at,
    )


def load_faculty_stats(db: Session) -> List[FacultyStatsOut]:
    return ratings.build_faculty_stats(
        approved_faculty_query(db).all(),
        approved_reviews_query(db).all(),
        stars=db.query(FacultyStar).all(),
        blacklist_votes=db.query(BlacklistVote).all(),
        faculty_votes=db.query(FacultyVote).all(),
    )


def faculty_counts(db: Session, faculty_id: int, user_id: str) -> FacultyCountsOut:
    my_vote = (
        db.query(FacultyVote)
        .filter(FacultyVote.faculty_id == faculty_id, FacultyVote.user_id == user_id)
        .first()
    )
    return FacultyCountsOut(
        faculty_id=faculty_id,
        star_count=db.query(FacultyStar).filter(FacultyStar.faculty_id == faculty_id).count(),
        blacklist_count=db.query(BlacklistVote).filter(BlacklistVote.faculty_id == faculty_id).count(),
        upvotes=db.query(FacultyVote).filter(
            FacultyVote.faculty_id == faculty_id, FacultyVote.vote_type == "up"
        ).count(),
        downvotes=db.query(FacultyVote).filter(
            FacultyVote.faculty_id == faculty_id, FacultyVote.vote_type == "down"
        ).count(),
        starred=db.query(FacultyStar).filter(
            FacultyStar.faculty_id == faculty_id, FacultyStar.user_id == user_id
        ).first() is not None,
        blacklisted=db.query(BlacklistVote).filter(
            BlacklistVote.faculty_id == faculty_id, BlacklistVote.user_id == user_id
        ).first() is not None,
        vote=my_vote.vote_type if my_vote else None,
    )


def toggle_flag(db: Session, model, faculty_id: int, user_id: str):
    existing = db.query(model).filter(model.faculty_id == faculty_id, model.user_id == user_id).first()
    if existing:
        db.delete(existing)
    else:
        db.add(model(faculty_id=faculty_id, user_id=user_id))
    db.commit()

# ======================
# HEALTH & AUTH
# ======================


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/auth/me", response_model=ProfileOut)
def read_users_me(current_user: Profile = Depends(get_current_user)):
    return current_user

# ======================
# FACULTY BROWSE & SEARCH
# ======================


@app.get("/faculty", response_model=List[FacultyOut])
def browse_faculty(
    q: Optional[str] = None,
    department: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    query = approved_faculty_query(db)
    if q and q.strip():
        pattern = f"%{q.strip()}%"
        query = query.filter(or_(
            Faculty.name.ilike(pattern),
            Faculty.faculty_id.ilike(pattern),
            Faculty.department.ilike(pattern),
        ))
    if department and department != "all":
        query = query.filter(Faculty.department == department)
    return query.order_by(Faculty.name).all()


@app.get("/faculty/search", response_model=List[FacultyOut])
def search_faculty(
    q: str = "",
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    if not q.strip():
        return []
    pattern = f"%{q.strip()}%"
    return (
        approved_faculty_query(db)
        .filter(or_(
            Faculty.name.ilike(pattern),
            Faculty.department.ilike(pattern),
            Faculty.faculty_id.ilike(pattern),
        ))
        .order_by(Faculty.created_at.desc(), Faculty.id.desc())
        .all()
    )


@app.get("/faculty/departments", response_model=List[str])
def list_departments(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    rows = approved_faculty_query(db).with_entities(Faculty.department).distinct().all()
    return sorted(row[0] for row in rows)


@app.get("/faculty/recent", response_model=List[FacultyOut])
def recent_faculty(
    limit: int = 12,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    limit = max(1, min(limit, 100))
    return (
        approved_faculty_query(db)
        .order_by(Faculty.created_at.desc(), Faculty.id.desc())
        .limit(limit)
        .all()
    )


@app.get("/faculty/random", response_model=FacultyOut)
def random_faculty(db: Session = Depends(get_db)):
    faculty = approved_faculty_query(db).all()
    if not faculty:
        raise HTTPException(status_code=404, detail="No faculty available")
    return random.choice(faculty)


@app.get("/faculty/top", response_model=TopFacultyOut)
def top_faculty(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    stats = load_faculty_stats(db)
    return TopFacultyOut(
        top_rated=ratings.top_rated(stats),
        community_favorites=ratings.community_favorites(stats),
    )


@app.get("/faculty/blacklisted", response_model=List[FacultyStatsOut])
def blacklisted_faculty(db: Session = Depends(get_db)):
    return ratings.blacklisted(load_faculty_stats(db))


@app.get("/faculty/{faculty_id}", response_model=FacultyDetailOut)
def get_faculty(
    faculty_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    faculty = get_visible_faculty(db, faculty_id, current_user)
    reviews = approved_reviews_query(db).filter(Review.faculty_id == faculty.id).all()
    return FacultyDetailOut(
        **FacultyOut.model_validate(faculty).model_dump(),
        average_rating=ratings.average_rating(reviews),
        review_count=len(reviews),
    )

# ======================
# FACULTY SUBMISSIONS
# ======================


@app.post("/faculty", response_model=FacultyCreateOut, status_code=status.HTTP_201_CREATED)
def add_faculty(
    body: FacultyIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    name = body.name.strip()
    department = body.department.strip()
    if not name or not department:
        raise HTTPException(status_code=400, detail="Name and Department are required")
    if body.review is not None:
        validate_review(body.review)

    faculty = Faculty(
        faculty_id=(body.faculty_id or "").strip() or None,
        name=name,
        department=department,
        contact_email=body.contact_email or None,
        mobile_number=body.mobile_number,
        office_hours=body.office_hours,
        courses_taught=clean_courses(body.courses_taught),
        photo_url=body.photo_url,
        details_image_url=body.details_image_url,
        created_by=current_user.user_id,
        approved=not FACULTY_REQUIRE_APPROVAL,
    )
    db.add(faculty)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Faculty already exists with this email address")

    points = 0
    if faculty.approved:
        points += reward(db, faculty, current_user.user_id, FACULTY_POINTS)

    if body.review is not None:
        review, _ = upsert_review(db, faculty, current_user, body.review)
        db.flush()
        if faculty.approved and review.status == STATUS_APPROVED:
            points += reward(db, review, current_user.user_id, REVIEW_POINTS)

    db.commit()
    db.refresh(faculty)
    logger.info("Faculty %s added by %s (approved=%s)", faculty.id, current_user.user_id, faculty.approved)

    return FacultyCreateOut(
        **FacultyOut.model_validate(faculty).model_dump(),
        points_awarded=points,
    )


@app.patch("/faculty/{faculty_id}", response_model=FacultyOut)
def edit_faculty(
    faculty_id: int,
    body: FacultyUpdateIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    faculty = get_faculty_or_404(db, faculty_id)
    if faculty.created_by != current_user.user_id:
        raise HTTPException(status_code=403, detail="You don't have permission to edit this faculty")

    changes = body.model_dump(exclude_unset=True)
    for field in ("name", "department"):
        if field in changes:
            changes[field] = (changes[field] or "").strip()
            if not changes[field]:
                raise HTTPException(status_code=400, detail="Name and Department are required")
    if "courses_taught" in changes:
        changes["courses_taught"] = clean_courses(changes["courses_taught"])

    for key, value in changes.items():
        setattr(faculty, key, value)
    db.add(faculty)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Faculty already exists with this email address")
    db.refresh(faculty)
    return faculty

# ======================
# FACULTY VOTES, STARS & BLACKLIST FLAGS
# ======================


@app.post("/faculty/{faculty_id}/star", response_model=FacultyCountsOut)
def toggle_star(
    faculty_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    faculty = get_visible_faculty(db, faculty_id, current_user)
    toggle_flag(db, FacultyStar, faculty.id, current_user.user_id)
    return faculty_counts(db, faculty.id, current_user.user_id)


@app.post("/faculty/{faculty_id}/blacklist", response_model=FacultyCountsOut)
def toggle_blacklist(
    faculty_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    faculty = get_visible_faculty(db, faculty_id, current_user)
    toggle_flag(db, BlacklistVote, faculty.id, current_user.user_id)
    return faculty_counts(db, faculty.id, current_user.user_id)


@app.post("/faculty/{faculty_id}/vote", response_model=FacultyCountsOut)
def vote_faculty(
    faculty_id: int,
    body: FacultyVoteIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    if body.vote_type not in FACULTY_VOTE_TYPES:
        raise HTTPException(status_code=400, detail="Vote must be 'up' or 'down'")
    faculty = get_visible_faculty(db, faculty_id, current_user)

    existing = (
        db.query(FacultyVote)
        .filter(FacultyVote.faculty_id == faculty.id, FacultyVote.user_id == current_user.user_id)
        .first()
    )
    if existing and existing.vote_type == body.vote_type:
        db.delete(existing)
    elif existing:
        existing.vote_type = body.vote_type
    else:
        db.add(FacultyVote(faculty_id=faculty.id, user_id=current_user.user_id, vote_type=body.vote_type))
    db.commit()
    return faculty_counts(db, faculty.id, current_user.user_id)

# ======================
# FACULTY REVIEWS API
# ======================


@app.post("/faculty/{faculty_id}/reviews", response_model=ReviewSubmitOut)
def submit_review(
    faculty_id: int,
    body: ReviewIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    validate_review(body)
    faculty = get_faculty_or_404(db, faculty_id)
    if not faculty.approved:
        raise HTTPException(status_code=404, detail="Faculty not found")

    review, created = upsert_review(db, faculty, current_user, body)
    db.flush()
    points = 0
    if review.status == STATUS_APPROVED:
        points = reward(db, review, current_user.user_id, REVIEW_POINTS)
    db.commit()
    db.refresh(review)
    logger.info(
        "Review %s %s for faculty %s (status=%s)",
        review.id, "submitted" if created else "updated", faculty.id, review.status,
    )

    reviews = approved_reviews_query(db).filter(Review.faculty_id == faculty.id).all()
    return ReviewSubmitOut(
        message="Review submitted successfully!" if created else "Review updated successfully!",
        review_id=review.id,
        status=review.status,
        points_awarded=points,
        avg_rating=ratings.average_rating(reviews),
    )


@app.get("/faculty/{faculty_id}/reviews", response_model=FacultySummaryOut)
def get_faculty_reviews(
    faculty_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    faculty = get_visible_faculty(db, faculty_id, current_user)
    reviews = approved_reviews_query(db).filter(Review.faculty_id == faculty.id).all()
    return ratings.build_faculty_summary(faculty, reviews)

# ======================
# COMMENTS API
# ======================


@app.get("/reviews/{review_id}/comments", response_model=List[CommentOut])
def list_comments(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    comments = (
        db.query(Comment)
        .filter(Comment.review_id == review_id, Comment.status == STATUS_APPROVED)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    return [comment_to_out(c) for c in comments]


@app.post("/reviews/{review_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def post_comment(
    review_id: int,
    body: CommentIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    content = body.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Please write a comment")
    if len(content) > COMMENT_MAX_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Comment must be at most {COMMENT_MAX_LENGTH} characters",
        )

    review = approved_reviews_query(db).filter(Review.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    comment = Comment(
        review_id=review.id,
        faculty_id=review.faculty_id,
        user_id=current_user.user_id,
        content=content,
        status=STATUS_PENDING if COMMENTS_REQUIRE_APPROVAL else STATUS_APPROVED,
    )
    db.add(comment)
    db.flush()
    if comment.status == STATUS_APPROVED:
        reward(db, comment, current_user.user_id, COMMENT_POINTS)
    db.commit()
    db.refresh(comment)
    return comment_to_out(comment)


@app.post("/comments/{comment_id}/vote", response_model=CommentVoteOut)
def vote_comment(
    comment_id: int,
    body: CommentVoteIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    if body.vote_type not in COMMENT_VOTE_TYPES:
        raise HTTPException(status_code=400, detail="Vote must be 'like' or 'dislike'")
    comment = (
        db.query(Comment)
        .filter(Comment.id == comment_id, Comment.status == STATUS_APPROVED)
        .first()
    )
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    existing = (
        db.query(CommentVote)
        .filter(CommentVote.comment_id == comment.id, CommentVote.user_id == current_user.user_id)
        .first()
    )
    vote = body.vote_type
    if existing and existing.vote_type == body.vote_type:
        db.delete(existing)
        vote = None
    elif existing:
        existing.vote_type = body.vote_type
    else:
        db.add(CommentVote(comment_id=comment.id, user_id=current_user.user_id, vote_type=body.vote_type))
    db.flush()

    votes = db.query(CommentVote).filter(CommentVote.comment_id == comment.id)
    comment.likes = votes.filter(CommentVote.vote_type == "like").count()
    comment.dislikes = votes.filter(CommentVote.vote_type == "dislike").count()
    db.commit()

    return CommentVoteOut(comment_id=comment.id, likes=comment.likes, dislikes=comment.dislikes, vote=vote)

# ======================
# PROFILE & LEADERBOARD
# ======================


@app.get("/profile/me", response_model=ProfileDetailOut)
def my_profile(
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    reviews = (
        db.query(Review)
        .filter(Review.user_id == current_user.user_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
        .all()
    )
    return ProfileDetailOut(
        profile=ProfileOut.model_validate(current_user),
        approved_review_count=sum(1 for r in reviews if r.status == STATUS_APPROVED),
        reviews=[ratings.own_review_to_out(r) for r in reviews],
    )


@app.patch("/profile/me", response_model=ProfileOut)
def update_profile(
    body: ProfileUpdateIn,
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user),
):
    changes = body.model_dump(exclude_unset=True)
    if "display_name" in changes:
        changes["display_name"] = (changes["display_name"] or "").strip()
        if not changes["display_name"]:
            raise HTTPException(status_code=400, detail="Display name cannot be empty")
    for key, value in changes.items():
        setattr(current_user, key, value)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return current_user


@app.get("/leaderboard", response_model=LeaderboardOut)
def leaderboard(db: Session = Depends(get_db)):
    top_users = (
        db.query(Profile)
        .order_by(Profile.points.desc(), Profile.created_at.asc())
        .limit(LEADERBOARD_SIZE)
        .all()
    )
    recent_users = (
        db.query(Profile)
        .order_by(Profile.created_at.desc(), Profile.id.desc())
        .limit(LEADERBOARD_SIZE)
        .all()
    )
    return LeaderboardOut(
        top_users=[LeaderboardEntry.model_validate(p) for p in top_users],
        recent_users=[LeaderboardEntry.model_validate(p) for p in recent_users],
    )

# ======================
# MODERATION API (ADMIN ONLY)
# ======================


@app.get("/admin/pending", response_model=PendingOut)
def pending_items(
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    faculty = db.query(Faculty).filter(Faculty.approved.is_(False)).order_by(Faculty.created_at).all()
    reviews = db.query(Review).filter(Review.status == STATUS_PENDING).order_by(Review.created_at).all()
    comments = db.query(Comment).filter(Comment.status == STATUS_PENDING).order_by(Comment.created_at).all()
    return PendingOut(
        faculty=[FacultyOut.model_validate(f) for f in faculty],
        reviews=[ratings.own_review_to_out(r) for r in reviews],
        comments=[comment_to_out(c) for c in comments],
    )


@app.post("/admin/faculty/{faculty_id}/approve", response_model=FacultyOut)
def approve_faculty(
    faculty_id: int,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    faculty = get_faculty_or_404(db, faculty_id)
    faculty.approved = True
    reward(db, faculty, faculty.created_by, FACULTY_POINTS)
    # reviews already approved go public with the faculty
    for review in faculty.reviews:
        if review.status == STATUS_APPROVED:
            reward(db, review, review.user_id, REVIEW_POINTS)
    db.commit()
    db.refresh(faculty)
    logger.info("Faculty %s approved by %s", faculty.id, admin.user_id)
    return faculty


@app.post("/admin/faculty/{faculty_id}/reject")
def reject_faculty(
    faculty_id: int,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    faculty = get_faculty_or_404(db, faculty_id)
    db.delete(faculty)
    db.commit()
    logger.info("Faculty %s rejected and removed by %s", faculty_id, admin.user_id)
    return {"message": "Faculty rejected and removed", "faculty_id": faculty_id}


def get_review_or_404(db: Session, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review


@app.post("/admin/reviews/{review_id}/approve", response_model=OwnReviewOut)
def approve_review(
    review_id: int,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    review = get_review_or_404(db, review_id)
    review.status = STATUS_APPROVED
    review.rejection_reason = None
    reward(db, review, review.user_id, REVIEW_POINTS)
    db.commit()
    db.refresh(review)
    logger.info("Review %s approved by %s", review.id, admin.user_id)
    return ratings.own_review_to_out(review)


@app.post("/admin/reviews/{review_id}/reject", response_model=OwnReviewOut)
def reject_review(
    review_id: int,
    body: Optional[RejectIn] = None,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    review = get_review_or_404(db, review_id)
    review.status = STATUS_REJECTED
    review.rejection_reason = (body.reason if body and body.reason else None) or "Inappropriate content"
    db.commit()
    db.refresh(review)
    logger.info("Review %s rejected by %s", review.id, admin.user_id)
    return ratings.own_review_to_out(review)


def get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@app.post("/admin/comments/{comment_id}/approve", response_model=CommentOut)
def approve_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    comment = get_comment_or_404(db, comment_id)
    comment.status = STATUS_APPROVED
    reward(db, comment, comment.user_id, COMMENT_POINTS)
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s approved by %s", comment.id, admin.user_id)
    return comment_to_out(comment)


@app.post("/admin/comments/{comment_id}/reject", response_model=CommentOut)
def reject_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    admin: Profile = Depends(require_admin),
):
    comment = get_comment_or_404(db, comment_id)
    comment.status = STATUS_REJECTED
    db.commit()
    db.refresh(comment)
    logger.info("Comment %s rejected by %s", comment.id, admin.user_id)
    return comment_to_out(comment)
