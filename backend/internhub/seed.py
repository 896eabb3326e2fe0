from datetime import datetime
from sqlalchemy.orm import Session
from internhub.core.database import SessionLocal
from internhub.models.entities import (
    Application,
    Internship,
    PortfolioProject,
    Student,
    StudentDetail,
    UserAccount,
)
from internhub.services.auth import hash_password

SEED_PASSWORD = "Password123!"

USERS = [
    ("Alice Student", "alice@example.com", "student"),
    ("Bob Student", "bob@example.com", "student"),
    ("Faculty Admin", "faculty@example.com", "faculty"),
]

STUDENTS = {
    "alice@example.com": {
        "roll_number": "CS2024001",
        "department": "Computer Science",
        "semester": 6,
        "cgpa": 8.5,
        "phone": "+919876543210",
        "approved": True,
    },
    "bob@example.com": {
        "roll_number": "CS2024002",
        "department": "Computer Science",
        "semester": 5,
        "cgpa": 7.8,
        "phone": "+919876543211",
        "approved": True,
    },
}

INTERNSHIPS = [
    {
        "title": "Full Stack Development Intern",
        "description": "Work on MERN stack projects with experienced developers",
        "company_name": "Tech Innovations Pvt Ltd",
        "location": "Mumbai",
        "type": "hybrid",
        "duration": 12,
        "stipend": 15000,
        "required_skills": ["React", "Node.js", "MongoDB", "Express"],
    },
    {
        "title": "Data Science Intern",
        "description": "Work on ML models and data analysis",
        "company_name": "Analytics Pro",
        "location": "Bangalore",
        "type": "remote",
        "duration": 16,
        "stipend": 20000,
        "required_skills": ["Python", "Pandas", "Scikit-learn", "SQL"],
    },
    {
        "title": "Mobile App Development Intern",
        "description": "Build Android/iOS apps using React Native",
        "company_name": "Mobile Solutions",
        "location": "Pune",
        "type": "onsite",
        "duration": 10,
        "stipend": 12000,
        "required_skills": ["React Native", "JavaScript", "Firebase"],
    },
]

PROJECTS = [
    {
        "title": "E-commerce Website",
        "description": "Full stack e-commerce platform built with MERN",
        "github_url": "https://github.com/alice/ecommerce",
        "live_url": "https://myshop.com",
        "tags": ["React", "Node.js", "MongoDB"],
    },
    {
        "title": "Weather App",
        "description": "React-based weather forecasting app",
        "github_url": "https://github.com/alice/weather",
        "live_url": "https://myweather.com",
        "tags": ["React", "API", "CSS"],
    },
]


def get_or_create(session: Session, model, defaults=None, **kwargs):
    instance = session.query(model).filter_by(**kwargs).one_or_none()
    if instance:
        return instance
    params = dict(kwargs)
    if defaults:
        params.update(defaults)
    instance = model(**params)
    session.add(instance)
    session.flush()
    return instance


def ensure_user(session: Session, name: str, email: str, role: str) -> UserAccount:
    existing = session.query(UserAccount).filter(UserAccount.email == email).one_or_none()
    if existing:
        return existing
    salt, digest = hash_password(SEED_PASSWORD)
    user = UserAccount(
        email=email,
        name=name,
        role=role,
        password_salt=salt,
        password_hash=digest,
        created_at=datetime.utcnow(),
    )
    session.add(user)
    session.flush()
    return user


def seed():
    session = SessionLocal()
    try:
        users = {email: ensure_user(session, name, email, role) for name, email, role in USERS}
        staff = users["faculty@example.com"]

        students = {}
        for email, fields in STUDENTS.items():
            students[email] = get_or_create(
                session,
                Student,
                user_id=users[email].id,
                defaults=fields,
            )

        alice = students["alice@example.com"]
        get_or_create(
            session,
            StudentDetail,
            student_id=alice.id,
            defaults={
                "bio": "Passionate about web development",
                "github": "https://github.com/alice",
                "linkedin": "https://linkedin.com/in/alice",
                "skills": ["JavaScript", "React", "Node.js", "Python"],
                "interests": ["Web Development", "AI", "Cloud Computing"],
            },
        )

        internships = {}
        for fields in INTERNSHIPS:
            defaults = {key: value for key, value in fields.items() if key not in {"title", "company_name"}}
            defaults["posted_by"] = staff.id
            internships[fields["title"]] = get_or_create(
                session,
                Internship,
                title=fields["title"],
                company_name=fields["company_name"],
                defaults=defaults,
            )

        get_or_create(
            session,
            Application,
            student_id=alice.id,
            internship_id=internships["Full Stack Development Intern"].id,
            defaults={
                "cover_letter": "I am very interested in this full stack position...",
                "status": "pending",
            },
        )
        get_or_create(
            session,
            Application,
            student_id=students["bob@example.com"].id,
            internship_id=internships["Data Science Intern"].id,
            defaults={
                "cover_letter": "I have strong data science skills...",
                "status": "accepted",
                "reviewed_at": datetime.utcnow(),
            },
        )

        for fields in PROJECTS:
            get_or_create(
                session,
                PortfolioProject,
                student_id=alice.id,
                title=fields["title"],
                defaults={key: value for key, value in fields.items() if key != "title"},
            )

        session.commit()
    finally:
        session.close()


if __name__ == "__main__":
    seed()
