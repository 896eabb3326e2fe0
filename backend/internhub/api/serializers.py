from internhub.models.entities import (
    Application,
    Internship,
    Mentor,
    Student,
    StudentDetail,
    UserAccount,
)


def serialize_user_summary(user: UserAccount | None, *, include_email: bool = True) -> dict | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email if include_email else None,
    }


def serialize_user(user: UserAccount) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "is_active": user.is_active,
        "github_username": user.github_username,
        "github_connected_at": user.github_connected_at,
        "last_github_sync": user.last_github_sync,
        "created_at": user.created_at,
    }


def serialize_student_detail(detail: StudentDetail | None) -> dict | None:
    if detail is None:
        return None
    return {
        "id": detail.id,
        "student_id": detail.student_id,
        "bio": detail.bio,
        "gender": detail.gender,
        "dob": detail.dob,
        "avatar_url": detail.avatar_url,
        "github": detail.github,
        "linkedin": detail.linkedin,
        "skills": detail.skills or [],
        "interests": detail.interests or [],
        "resume_url": detail.resume_url,
        "department": detail.department,
        "updated_at": detail.updated_at,
    }


def serialize_student(student: Student, *, include_detail: bool = False) -> dict:
    return {
        "id": student.id,
        "user_id": student.user_id,
        "user": serialize_user_summary(student.user),
        "roll_number": student.roll_number,
        "department": student.department,
        "semester": student.semester,
        "cgpa": student.cgpa,
        "date_of_birth": student.date_of_birth,
        "phone": student.phone,
        "approved": student.approved,
        "detail": serialize_student_detail(student.detail) if include_detail else None,
        "created_at": student.created_at,
        "updated_at": student.updated_at,
    }


def serialize_internship(internship: Internship, *, applications_count: int | None = None) -> dict:
    return {
        "id": internship.id,
        "title": internship.title,
        "description": internship.description,
        "company_name": internship.company_name,
        "location": internship.location,
        "type": internship.type,
        "duration": internship.duration,
        "stipend": internship.stipend,
        "required_skills": internship.required_skills or [],
        "start_date": internship.start_date,
        "end_date": internship.end_date,
        "application_deadline": internship.application_deadline,
        "posted_by": internship.posted_by,
        "is_active": internship.is_active,
        "applications_count": applications_count,
        "created_at": internship.created_at,
        "updated_at": internship.updated_at,
    }


def serialize_application(application: Application) -> dict:
    student = application.student
    return {
        "id": application.id,
        "student_id": application.student_id,
        "internship_id": application.internship_id,
        "cover_letter": application.cover_letter,
        "resume_url": application.resume_url,
        "status": application.status,
        "rejection_reason": application.rejection_reason,
        "applied_at": application.applied_at,
        "reviewed_at": application.reviewed_at,
        "updated_at": application.updated_at,
        "student": (
            {
                "id": student.id,
                "roll_number": student.roll_number,
                "department": student.department,
                "user": serialize_user_summary(student.user),
            }
            if student
            else None
        ),
        "internship": serialize_internship(application.internship) if application.internship else None,
    }


def serialize_mentor(mentor: Mentor, *, counts: dict[str, int] | None = None) -> dict:
    return {
        "id": mentor.id,
        "user": serialize_user_summary(mentor.user),
        "expertise": mentor.expertise or [],
        "bio": mentor.bio,
        "rating": float(mentor.rating or 0.0),
        "sessions_count": counts.get("sessions") if counts else None,
        "reviews_count": counts.get("reviews") if counts else None,
        "created_at": mentor.created_at,
    }
