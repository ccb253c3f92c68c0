"""
Organization domain models

Organizations, their projects and teams as the dashboard receives them.
"""

from dataclasses import dataclass, field


@dataclass
class Team:
    """
    A team of the organization.

    Attributes:
        id: Team identifier
        slug: URL-safe team name, used as the join key with projects
        is_member: Whether the current user belongs to the team
        projects: Projects attached once team membership is resolved
    """

    id: str
    slug: str
    is_member: bool = False
    projects: list["Project"] = field(default_factory=list)


@dataclass
class Project:
    """
    A project of the organization.

    Attributes:
        id: Project id as sent by the API, normally a numeric string
        slug: URL-safe project name
        is_member: Whether the current user is a member of the project
        teams: Teams the project belongs to
    """

    id: str
    slug: str
    is_member: bool = False
    teams: list[Team] = field(default_factory=list)


@dataclass
class Organization:
    """
    Organization context of the dashboard.

    ``projects`` and ``teams`` are None when the organization payload was
    loaded without them.
    """

    slug: str
    id: str | None = None
    projects: list[Project] | None = None
    teams: list[Team] | None = None

    def member_project_ids(self) -> list[int]:
        """Ids of the projects the current user is a member of; non-numeric ids are skipped"""
        return [
            int(project.id) for project in self.projects or [] if project.is_member and str(project.id).isdigit()
        ]
