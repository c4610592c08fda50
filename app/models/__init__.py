"""Models package."""
from app.models.user import User, UserRole, EmploymentType
from app.models.project import Project, ProjectMember, ProjectStatus, Priority
from app.models.milestone import Milestone, MilestoneStatus
from app.models.task import Task, TaskStatus
from app.models.budget_item import BudgetItem, BudgetCategory
from app.models.stakeholder import Stakeholder, StakeholderRole
from app.models.project_file import ProjectFile, FileCategory
from app.models.time_entry import TimeEntry
from app.models.adhoc_request import AdHocRequest, AdHocRequestComment, RequestStatus, RequestPriority
from app.models.activity_log import ActivityLog, ActivityEntityType, ActivityAction

__all__ = [
    "User", "UserRole", "EmploymentType",
    "Project", "ProjectMember", "ProjectStatus", "Priority",
    "Milestone", "MilestoneStatus",
    "Task", "TaskStatus",
    "BudgetItem", "BudgetCategory",
    "Stakeholder", "StakeholderRole",
    "ProjectFile", "FileCategory",
    "TimeEntry",
    "AdHocRequest", "AdHocRequestComment", "RequestStatus", "RequestPriority",
    # Audit ledger
    "ActivityLog", "ActivityEntityType", "ActivityAction",
]
