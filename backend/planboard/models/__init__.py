from planboard.models.assignment import Assignment
from planboard.models.assignment_group import AssignmentGroup
from planboard.models.day_assignment import DayAssignment
from planboard.models.day_off import DayOff
from planboard.models.milestone import Milestone
from planboard.models.project import Project
from planboard.models.team_member import TeamMember
from planboard.models.user_setting import UserSetting

__all__ = [
    "Assignment",
    "AssignmentGroup",
    "DayAssignment",
    "DayOff",
    "Milestone",
    "Project",
    "TeamMember",
    "UserSetting",
]
