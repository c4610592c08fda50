"""Seed demo users, one sample project and one ad-hoc request."""
from datetime import timedelta
from sqlalchemy.orm import Session
from app.core.database import SessionLocal
from app.core.security import get_password_hash
from app.core.time import today_utc
from app.core.activity_log import record_event, record_status_change
from app.models import (
    User,
    UserRole,
    EmploymentType,
    Project,
    ProjectMember,
    Task,
    TimeEntry,
    AdHocRequest,
    ActivityEntityType,
    ActivityAction,
)

DEMO_USERS = [
    {"email": "admin@example.com", "full_name": "Admin User", "role": UserRole.ADMIN.value,
     "password": "admin123", "hourly_rate": 120.0},
    {"email": "member@example.com", "full_name": "Team Member", "role": UserRole.USER.value,
     "password": "member123", "hourly_rate": 85.0},
    {"email": "contractor@example.com", "full_name": "Contract Analyst", "role": UserRole.USER.value,
     "password": "contract123", "hourly_rate": 140.0, "employment_type": EmploymentType.CONTRACTOR.value},
]


def seed_users(db: Session) -> dict:
    users = {}
    for user_data in DEMO_USERS:
        user = db.query(User).filter(User.email == user_data["email"]).first()
        if not user:
            user = User(
                email=user_data["email"],
                full_name=user_data["full_name"],
                role=user_data["role"],
                password_hash=get_password_hash(user_data["password"]),
                hourly_rate=user_data["hourly_rate"],
                employment_type=user_data.get("employment_type", EmploymentType.FTE.value),
            )
            db.add(user)
            db.flush()
            print(f"✓ Created user {user_data['email']}")
        users[user_data["email"]] = user
    return users


def seed_demo_project(db: Session, admin: User, member: User) -> None:
    if db.query(Project).filter(Project.name == "Portfolio Demo").first():
        print("Demo project already exists")
        return

    project = Project(name="Portfolio Demo", description="Sample project", owner_id=admin.user_id)
    db.add(project)
    db.flush()
    db.add(ProjectMember(project_id=project.project_id, user_id=member.user_id))
    record_event(db, project.project_id, ActivityEntityType.PROJECT, project.project_id,
                 ActivityAction.CREATED, performed_by=admin.user_id,
                 metadata={"name": project.name})

    task = Task(project_id=project.project_id, name="Kickoff", assignee_id=member.user_id)
    db.add(task)
    db.flush()
    record_event(db, project.project_id, ActivityEntityType.TASK, task.task_id,
                 ActivityAction.CREATED, performed_by=admin.user_id,
                 metadata={"name": task.name})
    task.status = "in_progress"
    record_status_change(db, project.project_id, ActivityEntityType.TASK, task.task_id,
                         "todo", "in_progress", performed_by=member.user_id)

    today = today_utc()
    for offset, hours in enumerate([4.0, 6.5, 3.0]):
        db.add(TimeEntry(project_id=project.project_id, user_id=member.user_id,
                         hours=hours, entry_date=today - timedelta(days=offset),
                         hourly_rate=member.hourly_rate))
    print(f"✓ Created demo project {project.project_id}")


def seed_adhoc_request(db: Session, assignee: User) -> None:
    if db.query(AdHocRequest).first():
        return
    db.add(AdHocRequest(
        title="Quarterly headcount extract",
        requestor_name="Finance Office",
        requestor_department="Finance",
        assigned_to=assignee.user_id,
        priority="high",
        due_date=today_utc() + timedelta(days=5),
        estimated_hours=3,
    ))
    print("✓ Created demo ad-hoc request")


def main():
    db = SessionLocal()
    try:
        users = seed_users(db)
        seed_demo_project(db, users["admin@example.com"], users["member@example.com"])
        seed_adhoc_request(db, users["contractor@example.com"])
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    main()
