"""
Teams for the current user

Resolves the teams (with their projects) the dashboard shows for a user.
Uses the organization payload when it already carries teams and projects,
otherwise asks the API for the user's teams.
"""

from dataclasses import dataclass, replace

import httpx

from dashquery.collectors.discover_rest_client import DiscoverRESTClient
from dashquery.core import get_logger
from dashquery.domain.constants import query_defaults
from dashquery.domain.organization import Organization, Project, Team
from dashquery.utils.error_handling import log_and_return_default
from dashquery.utils.projects_by_teams import get_projects_by_teams

logger = get_logger(__name__)


@dataclass
class TeamsState:
    """Teams loading result: ``error`` is set when the request failed"""

    teams: list[Team]
    loading_teams: bool = False
    error: Exception | None = None


def _project_from_payload(payload: dict) -> Project:
    return Project(id=str(payload["id"]), slug=payload["slug"], is_member=bool(payload.get("isMember", False)))


def _team_from_payload(payload: dict) -> Team:
    return Team(
        id=str(payload["id"]),
        slug=payload["slug"],
        is_member=bool(payload.get("isMember", False)),
        projects=[_project_from_payload(project) for project in payload.get("projects") or []],
    )


async def load_teams_for_user(
    client: DiscoverRESTClient, organization: Organization, is_superuser: bool = False
) -> TeamsState:
    """
    Load the user's teams.

    Args:
        client: Network client (only used when the organization lacks teams/projects)
        organization: Current organization
        is_superuser: Whether the user is a superuser (sees all teams if member of none)

    Returns:
        TeamsState with teams; failures are reported in ``error``
    """
    if organization.projects is not None and organization.teams is not None:
        projects_by_team, _ = get_projects_by_teams(organization.teams, organization.projects, is_superuser)
        teams = [replace(team, projects=projects_by_team.get(team.slug, [])) for team in organization.teams]
        return TeamsState(teams=teams)

    endpoint = query_defaults.USER_TEAMS_ENDPOINT.format(slug=organization.slug)
    try:
        payload = await client.request(endpoint, method="GET")
    except (httpx.HTTPError, ValueError) as e:
        teams = log_and_return_default(
            logger, e, context={"endpoint": endpoint}, default_value=[], error_type="User teams request"
        )
        return TeamsState(teams=teams, error=e)

    teams = [_team_from_payload(item) for item in payload]
    logger.info(f"Loaded {len(teams)} teams for {organization.slug}")
    return TeamsState(teams=teams)
