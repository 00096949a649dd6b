"""Linear GraphQL client with Result-based error handling.

Implements the ticket provider port on top of ``httpx``. Every public method
returns ``Ok(...)`` or ``Err(SproutError)``; HTTP failures, transport errors
and GraphQL ``errors`` arrays all map to external errors.
"""

import logging
from typing import Any

import httpx

from sprout.domain.shared import Err, Ok, Result, SproutError, flat_map
from sprout.domain.ticket import TicketNode, TicketState, User

logger = logging.getLogger(__name__)

LINEAR_API_URL = "https://api.linear.app/graphql"
DEFAULT_TIMEOUT = 30.0

_USER_FIELDS = "id name displayName email"

_ISSUE_FIELDS = f"""
    id
    title
    description
    identifier
    url
    priority
    state {{ id name type }}
    assignee {{ {_USER_FIELDS} }}
    children {{ nodes {{ id }} }}
"""

VIEWER_QUERY = f"query {{ viewer {{ {_USER_FIELDS} }} }}"

ASSIGNED_ISSUES_QUERY = f"""
query {{
    issues(
        filter: {{
            assignee: {{ isMe: {{ eq: true }} }}
            state: {{ type: {{ neq: "completed" }} }}
        }}
        orderBy: updatedAt
    ) {{
        nodes {{ {_ISSUE_FIELDS} }}
    }}
}}
"""

ISSUE_CHILDREN_QUERY = f"""
query($issueId: String!) {{
    issue(id: $issueId) {{
        children {{ nodes {{ {_ISSUE_FIELDS} }} }}
    }}
}}
"""

SUBTASK_CONTEXT_QUERY = """
query($issueId: String!) {
    issue(id: $issueId) { id team { id } }
    viewer { id }
}
"""

CREATE_SUBTASK_MUTATION = f"""
mutation($parentId: String!, $title: String!, $teamId: String!, $assigneeId: String!) {{
    issueCreate(input: {{
        title: $title
        parentId: $parentId
        teamId: $teamId
        assigneeId: $assigneeId
    }}) {{
        success
        issue {{ {_ISSUE_FIELDS} }}
    }}
}}
"""


def _user(data: dict[str, Any]) -> User:
    return User(
        id=data.get("id", ""),
        name=data.get("name") or "",
        display_name=data.get("displayName") or "",
        email=data.get("email") or "",
    )


def parse_issue(data: dict[str, Any]) -> TicketNode:
    """Build a ``TicketNode`` from an issue payload.

    Children are never populated here; the ``children { nodes { id } }``
    projection only tells whether there are any.
    """
    state = data.get("state") or {}
    assignee = data.get("assignee")
    child_nodes = (data.get("children") or {}).get("nodes") or []
    return TicketNode(
        id=data["id"],
        identifier=data.get("identifier") or "",
        title=data.get("title") or "",
        description=data.get("description") or "",
        url=data.get("url") or "",
        priority=int(data.get("priority") or 0),
        state=TicketState(name=state.get("name") or "", type=state.get("type") or ""),
        assignee=_user(assignee) if assignee else None,
        has_children=bool(child_nodes),
    )


class LinearClient:
    """Ticket provider backed by the Linear GraphQL API.

    Example:
        client = LinearClient(api_key)
        result = client.get_assigned_tickets()
        if isinstance(result, Ok):
            for ticket in result.value:
                print(ticket.identifier, ticket.title)
    """

    def __init__(
        self,
        api_key: str,
        url: str = LINEAR_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Personal API key, sent verbatim in ``Authorization``.
            url: GraphQL endpoint.
            timeout: Request timeout in seconds.
            transport: Optional transport, used by tests to mock the API.
        """
        self._url = url
        self._client = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Authorization": api_key, "Content-Type": "application/json"},
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "LinearClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> Result[dict[str, Any], SproutError]:
        """Run a GraphQL operation and return its ``data`` object."""
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables
        try:
            response = self._client.post(self._url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            return Err(
                SproutError.external(
                    "linear", f"API request failed with status {e.response.status_code}", cause=e
                ).with_detail("body", e.response.text[:500])
            )
        except httpx.HTTPError as e:
            return Err(SproutError.external("linear", "request failed", cause=e))
        except ValueError as e:
            return Err(SproutError.external("linear", "invalid JSON response", cause=e))

        errors = body.get("errors")
        if errors:
            messages = "; ".join(str(err.get("message", err)) for err in errors)
            return Err(SproutError.external("linear", f"GraphQL errors: {messages}"))
        return Ok(body.get("data") or {})

    # =========================================================================
    # Ticket provider
    # =========================================================================

    def get_current_user(self) -> Result[User, SproutError]:
        result = self.execute(VIEWER_QUERY)
        if isinstance(result, Err):
            return result
        viewer = result.value.get("viewer")
        if not viewer:
            return Err(SproutError.external("linear", "response has no viewer"))
        return Ok(_user(viewer))

    def get_assigned_tickets(self) -> Result[list[TicketNode], SproutError]:
        result = self.execute(ASSIGNED_ISSUES_QUERY)
        if isinstance(result, Err):
            return result
        nodes = (result.value.get("issues") or {}).get("nodes") or []
        tickets = [parse_issue(node) for node in nodes]
        logger.debug(f"Fetched {len(tickets)} assigned tickets")
        return Ok(tickets)

    def get_children(self, ticket_id: str) -> Result[list[TicketNode], SproutError]:
        result = self.execute(ISSUE_CHILDREN_QUERY, {"issueId": ticket_id})
        if isinstance(result, Err):
            return result
        issue = result.value.get("issue")
        if issue is None:
            return Err(SproutError.not_found("ticket", ticket_id))
        nodes = (issue.get("children") or {}).get("nodes") or []
        return Ok([parse_issue(node) for node in nodes])

    def create_subtask(self, parent_id: str, title: str) -> Result[TicketNode, SproutError]:
        """Create ``title`` under ``parent_id``, assigned to the current user.

        The parent's team and the viewer id are looked up first because the
        mutation requires both.
        """
        if not title.strip():
            return Err(SproutError.validation("subtask title cannot be empty"))

        def create(context: dict[str, Any]) -> Result[TicketNode, SproutError]:
            issue = context.get("issue")
            if issue is None:
                return Err(SproutError.not_found("ticket", parent_id))
            variables = {
                "parentId": parent_id,
                "title": title.strip(),
                "teamId": (issue.get("team") or {}).get("id", ""),
                "assigneeId": (context.get("viewer") or {}).get("id", ""),
            }
            created = self.execute(CREATE_SUBTASK_MUTATION, variables)
            if isinstance(created, Err):
                return created
            payload = created.value.get("issueCreate") or {}
            if not payload.get("success") or not payload.get("issue"):
                return Err(SproutError.external("linear", "failed to create subtask"))
            return Ok(parse_issue(payload["issue"]))

        return flat_map(self.execute(SUBTASK_CONTEXT_QUERY, {"issueId": parent_id}), create)

    def test_connection(self) -> Result[None, SproutError]:
        result = self.get_current_user()
        if isinstance(result, Err):
            return result
        return Ok(None)
