from datetime import datetime

from sqlalchemy import (
    create_engine, Column, Integer, String, Boolean, DateTime, Text, JSON,
    ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import sessionmaker, declarative_base, relationship

from config import SQLALCHEMY_DATABASE_URL

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

APP_ROLES = ("admin", "moderator", "user")

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

COMMENT_VOTE_TYPES = ("like", "dislike")
FACULTY_VOTE_TYPES = ("up", "down")

# ======================
# DB MODELS
# ======================


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    # subject claim of the identity provider's token
    user_id = Column(String, unique=True, index=True, nullable=False)
    display_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    points = Column(Integer, default=0)
    role = Column(String, default="user")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reviews = relationship("Review", back_populates="author")


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    role = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uix_user_role"),
    )


class Faculty(Base):
    __tablename__ = "faculty"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(String, nullable=True, index=True)
    name = Column(String, index=True, nullable=False)
    department = Column(String, index=True, nullable=False)
    contact_email = Column(String, nullable=True)
    mobile_number = Column(String, nullable=True)
    office_hours = Column(Text, nullable=True)
    courses_taught = Column(JSON, nullable=True)
    photo_url = Column(String, nullable=True)
    details_image_url = Column(String, nullable=True)
    approved = Column(Boolean, default=True)
    rewarded = Column(Boolean, default=False)
    created_by = Column(String, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    reviews = relationship("Review", back_populates="faculty", cascade="all, delete-orphan")
    comments = relationship("Comment", back_populates="faculty", cascade="all, delete-orphan")
    stars = relationship("FacultyStar", cascade="all, delete-orphan")
    blacklist_votes = relationship("BlacklistVote", cascade="all, delete-orphan")
    votes = relationship("FacultyVote", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("contact_email", name="faculty_contact_email_unique"),
    )


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=False)
    user_id = Column(String, ForeignKey("profiles.user_id"), nullable=False)
    content = Column(Text, nullable=False)

    teaching_quality = Column(Integer, nullable=True)
    approachability = Column(Integer, nullable=True)
    clarity = Column(Integer, nullable=True)
    availability = Column(Integer, nullable=True)
    fairness = Column(Integer, nullable=True)

    is_anonymous = Column(Boolean, default=False)
    status = Column(String, default=STATUS_APPROVED, index=True)
    rejection_reason = Column(String, nullable=True)
    rewarded = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    faculty = relationship("Faculty", back_populates="reviews")
    author = relationship("Profile", back_populates="reviews")
    comments = relationship("Comment", back_populates="review", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("user_id", "faculty_id", name="uix_user_faculty"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    review_id = Column(Integer, ForeignKey("reviews.id"), nullable=True)
    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=True)
    user_id = Column(String, ForeignKey("profiles.user_id"), nullable=False)
    content = Column(Text, nullable=False)
    likes = Column(Integer, default=0)
    dislikes = Column(Integer, default=0)
    rewarded = Column(Boolean, default=False)
    status = Column(String, default=STATUS_APPROVED, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    review = relationship("Review", back_populates="comments")
    faculty = relationship("Faculty", back_populates="comments")
    author = relationship("Profile")
    votes = relationship("CommentVote", cascade="all, delete-orphan")


class CommentVote(Base):
    __tablename__ = "comment_votes"

    id = Column(Integer, primary_key=True, index=True)
    comment_id = Column(Integer, ForeignKey("comments.id"), nullable=False)
    user_id = Column(String, nullable=False)
    vote_type = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uix_user_comment_vote"),
    )


class FacultyVote(Base):
    __tablename__ = "faculty_votes"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=False)
    user_id = Column(String, nullable=False)
    vote_type = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "faculty_id", name="uix_user_faculty_vote"),
    )


class FacultyStar(Base):
    __tablename__ = "faculty_stars"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=False)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "faculty_id", name="uix_user_faculty_star"),
    )


class BlacklistVote(Base):
    __tablename__ = "blacklist_votes"

    id = Column(Integer, primary_key=True, index=True)
    faculty_id = Column(Integer, ForeignKey("faculty.id"), nullable=False)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "faculty_id", name="uix_user_faculty_blacklist"),
    )


Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
