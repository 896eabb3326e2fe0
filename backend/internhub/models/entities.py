from enum import Enum
from uuid import uuid4
from datetime import datetime
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from internhub.core.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class UserRole(str, Enum):
    student = "student"
    mentor = "mentor"
    faculty = "faculty"
    admin = "admin"


STAFF_ROLES = {UserRole.faculty.value, UserRole.admin.value}


class InternshipType(str, Enum):
    onsite = "onsite"
    remote = "remote"
    hybrid = "hybrid"


class ApplicationStatus(str, Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    withdrawn = "withdrawn"


class SessionStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class UserAccount(Base):
    __tablename__ = "user_accounts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(160), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.student.value)
    password_salt = Column(String(200), nullable=False)
    password_hash = Column(String(200), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    github_username = Column(String(255), nullable=True)
    github_token = Column(Text, nullable=True)
    github_connected_at = Column(DateTime, nullable=True)
    last_github_sync = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, index=True)
    refresh_token_hash = Column(String(128), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)


class Student(Base):
    __tablename__ = "students"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, unique=True, index=True)
    roll_number = Column(String(64), nullable=False, unique=True, index=True)
    department = Column(String(160), nullable=True)
    semester = Column(Integer, nullable=True)
    cgpa = Column(Float, nullable=True)
    date_of_birth = Column(DateTime, nullable=True)
    phone = Column(String(32), nullable=True)
    approved = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("UserAccount")
    detail = relationship("StudentDetail", uselist=False, back_populates="student")


class StudentDetail(Base):
    __tablename__ = "student_details"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, unique=True, index=True)
    bio = Column(Text, nullable=True)
    gender = Column(String(32), nullable=True)
    dob = Column(DateTime, nullable=True)
    avatar_url = Column(Text, nullable=True)
    github = Column(Text, nullable=True)
    linkedin = Column(Text, nullable=True)
    skills = Column(JSONType, nullable=True)
    interests = Column(JSONType, nullable=True)
    resume_url = Column(Text, nullable=True)
    department = Column(String(160), nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    student = relationship("Student", back_populates="detail")


class Internship(Base):
    __tablename__ = "internships"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    company_name = Column(String(200), nullable=False)
    location = Column(String(160), nullable=True)
    type = Column(String(16), nullable=False, default=InternshipType.onsite.value)
    duration = Column(Integer, nullable=True)
    stipend = Column(Integer, nullable=True)
    required_skills = Column(JSONType, nullable=False, default=list)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    application_deadline = Column(DateTime, nullable=True)
    posted_by = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("student_id", "internship_id", name="uq_applications_student_internship"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    internship_id = Column(UUID(as_uuid=True), ForeignKey("internships.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=True)
    resume_url = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=ApplicationStatus.pending.value)
    rejection_reason = Column(Text, nullable=True)
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    reviewed_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    student = relationship("Student")
    internship = relationship("Internship")


class Mentor(Base):
    __tablename__ = "mentors"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, unique=True, index=True)
    expertise = Column(JSONType, nullable=False, default=list)
    bio = Column(Text, nullable=True)
    rating = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("UserAccount")


class MentorSession(Base):
    __tablename__ = "mentor_sessions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    mentor_id = Column(UUID(as_uuid=True), ForeignKey("mentors.id"), nullable=False, index=True)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    scheduled_at = Column(DateTime, nullable=False)
    meeting_link = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=SessionStatus.scheduled.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    mentor = relationship("Mentor")
    student = relationship("Student")


class MentorReview(Base):
    __tablename__ = "mentor_reviews"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_mentor_reviews_rating_range"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    mentor_id = Column(UUID(as_uuid=True), ForeignKey("mentors.id"), nullable=False, index=True)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    student = relationship("Student")


class Credit(Base):
    __tablename__ = "credits"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, unique=True, index=True)
    credits_earned = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class CreditAward(Base):
    __tablename__ = "credit_awards"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)
    awarded_by = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserNotification(Base):
    __tablename__ = "user_notifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, index=True)
    kind = Column(String(64), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime, nullable=True)
    metadata_json = Column("metadata", JSONType, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    posted_by = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    target_audience = Column(String(64), nullable=True)
    priority = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    poster = relationship("UserAccount")


class ChatRoom(Base):
    __tablename__ = "chat_rooms"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(160), nullable=False)
    type = Column(String(32), nullable=False, default="group")
    internship_id = Column(UUID(as_uuid=True), ForeignKey("internships.id"), nullable=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    participants = relationship("ChatParticipant", back_populates="room")


class ChatParticipant(Base):
    __tablename__ = "chat_participants"
    __table_args__ = (
        UniqueConstraint("chat_room_id", "user_id", name="uq_chat_participants_room_user"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    chat_room_id = Column(UUID(as_uuid=True), ForeignKey("chat_rooms.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, index=True)
    role = Column(String(16), nullable=False, default="member")
    joined_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    last_read_at = Column(DateTime, nullable=True)

    room = relationship("ChatRoom", back_populates="participants")
    user = relationship("UserAccount")


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    chat_room_id = Column(UUID(as_uuid=True), ForeignKey("chat_rooms.id"), nullable=False, index=True)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sender = relationship("UserAccount")


class DiscussionForum(Base):
    __tablename__ = "discussion_forums"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    topic = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(80), nullable=True, index=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False)
    is_pinned = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    creator = relationship("UserAccount")


class ForumPost(Base):
    __tablename__ = "forum_posts"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    forum_id = Column(UUID(as_uuid=True), ForeignKey("discussion_forums.id"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False)
    parent_post_id = Column(UUID(as_uuid=True), ForeignKey("forum_posts.id"), nullable=True, index=True)
    content = Column(Text, nullable=False)
    upvotes = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("UserAccount")


class DirectMessage(Base):
    __tablename__ = "direct_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    sender_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, index=True)
    receiver_id = Column(UUID(as_uuid=True), ForeignKey("user_accounts.id"), nullable=False, index=True)
    subject = Column(String(200), nullable=True)
    body = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sender = relationship("UserAccount", foreign_keys=[sender_id])


class Certification(Base):
    __tablename__ = "certifications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    issuer = Column(String(255), nullable=True)
    issue_date = Column(DateTime, nullable=True)
    credential_id = Column(String(255), nullable=True)
    credential_url = Column(Text, nullable=True)
    document_url = Column(Text, nullable=True)
    source = Column(String(16), nullable=False, default="manual")
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class CVGeneration(Base):
    __tablename__ = "cv_generations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    template_name = Column(String(80), nullable=False, default="default")
    file_url = Column(Text, nullable=False)
    format = Column(String(16), nullable=False, default="html")
    generated_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class PortfolioProject(Base):
    __tablename__ = "portfolio_projects"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    github_url = Column(Text, nullable=True)
    live_url = Column(Text, nullable=True)
    tags = Column(JSONType, nullable=False, default=list)
    source = Column(String(16), nullable=False, default="manual")
    github_repo_id = Column(String(64), nullable=True, unique=True, index=True)
    stars = Column(Integer, nullable=False, default=0)
    forks = Column(Integer, nullable=False, default=0)
    language = Column(String(80), nullable=True)
    last_synced_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
