from datetime import datetime
from typing import List, Dict, Optional

from pydantic import BaseModel, EmailStr

# ======================
# AUTH / PROFILE MODELS
# ======================


class TokenData(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None  # provider claim, not re-validated
    display_name: Optional[str] = None


class ProfileOut(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    points: int = 0
    role: str = "user"
    created_at: datetime

    class Config:
        from_attributes = True  # Pydantic v2


class ProfileUpdateIn(BaseModel):
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class LeaderboardEntry(BaseModel):
    user_id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    points: int = 0
    created_at: datetime

    class Config:
        from_attributes = True


class LeaderboardOut(BaseModel):
    top_users: List[LeaderboardEntry]
    recent_users: List[LeaderboardEntry]

# ======================
# FACULTY MODELS
# ======================


class FacultyBase(BaseModel):
    name: str
    department: str
    faculty_id: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    mobile_number: Optional[str] = None
    office_hours: Optional[str] = None
    courses_taught: Optional[List[str]] = None
    photo_url: Optional[str] = None
    details_image_url: Optional[str] = None


class RatingsIn(BaseModel):
    teaching_quality: int = 0
    approachability: int = 0
    clarity: int = 0
    availability: int = 0
    fairness: int = 0


class ReviewIn(RatingsIn):
    content: str = ""
    is_anonymous: bool = False


class FacultyIn(FacultyBase):
    review: Optional[ReviewIn] = None


class FacultyUpdateIn(BaseModel):
    name: Optional[str] = None
    department: Optional[str] = None
    faculty_id: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    mobile_number: Optional[str] = None
    office_hours: Optional[str] = None
    courses_taught: Optional[List[str]] = None
    photo_url: Optional[str] = None
    details_image_url: Optional[str] = None


class FacultyOut(FacultyBase):
    id: int
    approved: bool
    created_by: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FacultyStatsOut(BaseModel):
    id: int
    name: str
    department: str
    faculty_id: Optional[str] = None
    photo_url: Optional[str] = None
    average_rating: float = 0.0
    review_count: int = 0
    star_count: int = 0
    blacklist_count: int = 0
    upvotes: int = 0
    downvotes: int = 0


class FacultyCreateOut(FacultyOut):
    points_awarded: int = 0


class FacultyDetailOut(FacultyOut):
    average_rating: float = 0.0
    review_count: int = 0


class TopFacultyOut(BaseModel):
    top_rated: List[FacultyStatsOut]
    community_favorites: List[FacultyStatsOut]


class FacultyCountsOut(BaseModel):
    faculty_id: int
    star_count: int
    blacklist_count: int
    upvotes: int
    downvotes: int
    starred: bool = False
    blacklisted: bool = False
    vote: Optional[str] = None


class FacultyVoteIn(BaseModel):
    vote_type: str

# ======================
# REVIEW / COMMENT MODELS
# ======================


class ReviewOut(BaseModel):
    id: int
    faculty_id: int
    user_id: Optional[str] = None
    author_name: str
    content: str
    teaching_quality: Optional[int] = None
    approachability: Optional[int] = None
    clarity: Optional[int] = None
    availability: Optional[int] = None
    fairness: Optional[int] = None
    overall: float
    is_anonymous: bool = False
    status: str
    created_at: datetime


class OwnReviewOut(ReviewOut):
    faculty_name: Optional[str] = None
    rejection_reason: Optional[str] = None


class ReviewSubmitOut(BaseModel):
    message: str
    review_id: int
    status: str
    points_awarded: int
    avg_rating: float


class FacultySummaryOut(BaseModel):
    faculty_id: int
    faculty_name: str
    avg_rating: float
    count: int
    summary: str
    breakdown: Dict[int, int]
    dimensions: Dict[str, float]
    reviews: List[ReviewOut]


class CommentIn(BaseModel):
    content: str = ""


class CommentOut(BaseModel):
    id: int
    review_id: Optional[int] = None
    user_id: str
    author_name: str
    avatar_url: Optional[str] = None
    content: str
    likes: int = 0
    dislikes: int = 0
    status: str
    created_at: datetime


class CommentVoteIn(BaseModel):
    vote_type: str


class CommentVoteOut(BaseModel):
    comment_id: int
    likes: int
    dislikes: int
    vote: Optional[str] = None


class ProfileDetailOut(BaseModel):
    profile: ProfileOut
    approved_review_count: int
    reviews: List[OwnReviewOut]

# ======================
# MODERATION MODELS
# ======================


class RejectIn(BaseModel):
    reason: Optional[str] = None


class PendingOut(BaseModel):
    faculty: List[FacultyOut]
    reviews: List[OwnReviewOut]
    comments: List[CommentOut]
