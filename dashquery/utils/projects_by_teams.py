"""
Team / project join

Groups an organization's projects under the teams the current user belongs to.
"""

from dashquery.domain.organization import Project, Team


def get_projects_by_teams(
    teams: list[Team], projects: list[Project], is_superuser: bool = False
) -> tuple[dict[str, list[Project]], list[Project]]:
    """
    Map each of the user's teams to its projects.

    The user's teams are those with ``is_member``. A superuser who is not a
    member of any team sees every team. Projects without teams that the user
    is a member of are returned separately as teamless.

    Args:
        teams: Teams of the organization
        projects: Projects of the organization
        is_superuser: Whether the current user is a superuser

    Returns:
        (projects_by_team keyed by team slug, teamless_projects)

    Example:
        projects_by_team, teamless = get_projects_by_teams(org.teams, org.projects)
        for team in org.teams:
            print(team.slug, len(projects_by_team.get(team.slug, [])))
    """
    projects_by_team: dict[str, list[Project]] = {}
    teamless_projects: list[Project] = []

    users_teams = {team.slug for team in teams if team.is_member}
    if not users_teams and is_superuser:
        users_teams = {team.slug for team in teams}

    for project in projects:
        if not project.teams and project.is_member:
            teamless_projects.append(project)
            continue

        for team in project.teams:
            if team.slug not in users_teams:
                continue
            projects_by_team.setdefault(team.slug, []).append(project)

    return projects_by_team, teamless_projects
