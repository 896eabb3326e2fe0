from pydantic import BaseModel, Field, StrictInt
from uuid import UUID
from datetime import datetime
from typing import Any, List, Literal, Optional


class AuthRegisterIn(BaseModel):
    name: str
    email: str
    password: str
    role: Literal["student", "faculty", "admin"] = "student"


class AuthLoginIn(BaseModel):
    email: str
    password: str


class AuthRefreshIn(BaseModel):
    refresh_token: str


class AuthLogoutIn(BaseModel):
    refresh_token: str


class AuthOut(BaseModel):
    user_id: UUID
    role: str
    auth_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


class AuthActionOut(BaseModel):
    ok: bool
    message: str


class UserOut(BaseModel):
    id: UUID
    name: str
    email: str
    role: str
    is_active: bool
    github_username: Optional[str] = None
    github_connected_at: Optional[datetime] = None
    last_github_sync: Optional[datetime] = None
    created_at: datetime


class UserRoleIn(BaseModel):
    role: Literal["student", "mentor", "faculty", "admin"]


class UserSummaryOut(BaseModel):
    id: UUID
    name: str
    email: Optional[str] = None


class StudentIn(BaseModel):
    roll_number: str
    department: Optional[str] = None
    semester: Optional[int] = Field(default=None, ge=1, le=12)
    cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    date_of_birth: Optional[datetime] = None
    phone: Optional[str] = None


class StudentUpdateIn(BaseModel):
    roll_number: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[int] = Field(default=None, ge=1, le=12)
    cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    date_of_birth: Optional[datetime] = None
    phone: Optional[str] = None


class StudentApprovalIn(BaseModel):
    approved: bool = True


class StudentDetailIn(BaseModel):
    bio: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[datetime] = None
    avatar_url: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    skills: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    resume_url: Optional[str] = None
    department: Optional[str] = None


class StudentDetailOut(StudentDetailIn):
    id: UUID
    student_id: UUID
    updated_at: datetime


class StudentOut(BaseModel):
    id: UUID
    user_id: UUID
    user: Optional[UserSummaryOut] = None
    roll_number: str
    department: Optional[str] = None
    semester: Optional[int] = None
    cgpa: Optional[float] = None
    date_of_birth: Optional[datetime] = None
    phone: Optional[str] = None
    approved: bool
    detail: Optional[StudentDetailOut] = None
    created_at: datetime
    updated_at: datetime


class InternshipIn(BaseModel):
    title: str
    description: Optional[str] = None
    company_name: str
    location: Optional[str] = None
    type: Literal["onsite", "remote", "hybrid"] = "onsite"
    duration: Optional[int] = Field(default=None, ge=1)
    stipend: Optional[int] = Field(default=None, ge=0)
    required_skills: List[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None


class InternshipUpdateIn(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    type: Optional[Literal["onsite", "remote", "hybrid"]] = None
    duration: Optional[int] = Field(default=None, ge=1)
    stipend: Optional[int] = Field(default=None, ge=0)
    required_skills: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    is_active: Optional[bool] = None


class InternshipOut(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    company_name: str
    location: Optional[str] = None
    type: str
    duration: Optional[int] = None
    stipend: Optional[int] = None
    required_skills: List[str] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    application_deadline: Optional[datetime] = None
    posted_by: Optional[UUID] = None
    is_active: bool
    applications_count: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class ApplicationIn(BaseModel):
    student_id: UUID
    internship_id: UUID
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None


class ApplicationStatusIn(BaseModel):
    status: str
    rejection_reason: Optional[str] = None


class ApplicationStudentOut(BaseModel):
    id: UUID
    roll_number: str
    department: Optional[str] = None
    user: Optional[UserSummaryOut] = None


class ApplicationOut(BaseModel):
    id: UUID
    student_id: UUID
    internship_id: UUID
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    status: str
    rejection_reason: Optional[str] = None
    applied_at: datetime
    reviewed_at: Optional[datetime] = None
    updated_at: datetime
    student: Optional[ApplicationStudentOut] = None
    internship: Optional[InternshipOut] = None


class MentorRegisterIn(BaseModel):
    expertise: List[str] = Field(default_factory=list)
    bio: Optional[str] = None


class MentorUpdateIn(BaseModel):
    expertise: Optional[List[str]] = None
    bio: Optional[str] = None


class MentorOut(BaseModel):
    id: UUID
    user: Optional[UserSummaryOut] = None
    expertise: List[str] = Field(default_factory=list)
    bio: Optional[str] = None
    rating: float
    sessions_count: Optional[int] = None
    reviews_count: Optional[int] = None
    created_at: datetime


class MentorSessionIn(BaseModel):
    mentor_id: UUID
    scheduled_at: datetime
    meeting_link: Optional[str] = None


class MentorSessionStatusIn(BaseModel):
    status: str


class MentorSessionOut(BaseModel):
    id: UUID
    mentor_id: UUID
    student_id: UUID
    scheduled_at: datetime
    meeting_link: Optional[str] = None
    status: str
    mentor: Optional[UserSummaryOut] = None
    created_at: datetime


class MentorReviewIn(BaseModel):
    mentor_id: UUID
    rating: StrictInt
    reviews: Optional[str] = None


class MentorReviewOut(BaseModel):
    id: UUID
    mentor_id: UUID
    student_id: UUID
    rating: int
    reviews: Optional[str] = None
    student_name: Optional[str] = None
    created_at: datetime


class CreditAwardIn(BaseModel):
    amount: StrictInt
    reason: Optional[str] = None


class CreditOut(BaseModel):
    id: UUID
    student_id: UUID
    credits_earned: int
    created_at: datetime
    updated_at: datetime


class CreditAwardOut(BaseModel):
    id: UUID
    student_id: UUID
    amount: int
    reason: Optional[str] = None
    awarded_by: Optional[UUID] = None
    created_at: datetime


class NotificationOut(BaseModel):
    id: UUID
    kind: str
    title: str
    message: str
    is_read: bool
    read_at: Optional[datetime] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: datetime


class AnnouncementIn(BaseModel):
    title: str
    content: str
    target_audience: Optional[str] = None
    priority: int = 0
    expires_at: Optional[datetime] = None


class AnnouncementOut(BaseModel):
    id: UUID
    title: str
    content: str
    target_audience: Optional[str] = None
    priority: int
    is_active: bool
    expires_at: Optional[datetime] = None
    poster: Optional[UserSummaryOut] = None
    created_at: datetime


class ChatRoomIn(BaseModel):
    name: str
    type: str = "group"
    internship_id: Optional[UUID] = None
    participant_ids: List[UUID] = Field(default_factory=list)


class ChatMessageIn(BaseModel):
    message: str = Field(min_length=1)


class ForumIn(BaseModel):
    topic: str
    description: Optional[str] = None
    category: Optional[str] = None


class ForumPostIn(BaseModel):
    content: str = Field(min_length=1)
    parent_post_id: Optional[UUID] = None


class DirectMessageIn(BaseModel):
    receiver_id: UUID
    subject: Optional[str] = None
    body: str = Field(min_length=1)


class ChatMessageOut(BaseModel):
    id: UUID
    chat_room_id: UUID
    sender_id: UUID
    sender: Optional[UserSummaryOut] = None
    message: str
    created_at: datetime


class ChatRoomOut(BaseModel):
    id: UUID
    name: str
    type: str
    internship_id: Optional[UUID] = None
    created_by: UUID
    participant_ids: List[UUID] = Field(default_factory=list)
    last_message: Optional[ChatMessageOut] = None
    created_at: datetime


class ForumOut(BaseModel):
    id: UUID
    topic: str
    description: Optional[str] = None
    category: Optional[str] = None
    is_pinned: bool
    view_count: int
    posts_count: Optional[int] = None
    creator: Optional[UserSummaryOut] = None
    created_at: datetime


class ForumPostOut(BaseModel):
    id: UUID
    forum_id: UUID
    parent_post_id: Optional[UUID] = None
    content: str
    upvotes: int
    author: Optional[UserSummaryOut] = None
    replies: List["ForumPostOut"] = Field(default_factory=list)
    created_at: datetime


class ForumThreadOut(BaseModel):
    forum: ForumOut
    posts: List[ForumPostOut]


class DirectMessageOut(BaseModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    sender: Optional[UserSummaryOut] = None
    subject: Optional[str] = None
    body: str
    is_read: bool
    created_at: datetime


class CertificationUpdateIn(BaseModel):
    title: Optional[str] = None
    issuer: Optional[str] = None
    issue_date: Optional[datetime] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None


class CertificationOut(BaseModel):
    id: UUID
    student_id: UUID
    title: str
    issuer: Optional[str] = None
    issue_date: Optional[datetime] = None
    credential_id: Optional[str] = None
    credential_url: Optional[str] = None
    document_url: Optional[str] = None
    document_view_url: Optional[str] = None
    source: str
    created_at: datetime


class CVOut(BaseModel):
    id: UUID
    student_id: UUID
    template_name: str
    file_url: str
    format: str
    generated_at: datetime


class CVGenerateOut(BaseModel):
    cv: CVOut
    preview_url: Optional[str] = None


class GithubConnectIn(BaseModel):
    github_token: str


class PortfolioProjectOut(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    source: str
    stars: int
    forks: int
    language: Optional[str] = None
    last_synced_at: Optional[datetime] = None
