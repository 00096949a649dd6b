"""Pure rendering of a session state into Rich text.

``render_frame`` has no knowledge of Textual; the app hands its result to a
``Static`` widget after every update.
"""

from rich.console import Group
from rich.text import Text

from sprout.application.session import Mode, SessionState
from sprout.domain.ticket import StatusCategory, TicketNode, visible_nodes

INPUT_PLACEHOLDER = "enter branch name or select suggestion below"
SEARCH_PLACEHOLDER = "type to fuzzy search"
SUBTASK_PLACEHOLDER = "enter subtask title"
CURSOR = "█"

STATUS_STYLES = {
    StatusCategory.BACKLOG: "dim",
    StatusCategory.ACTIVE: "yellow",
    StatusCategory.COMPLETED: "green",
    StatusCategory.CANCELLED: "red",
}


def status_style(node: TicketNode) -> str:
    """Colour for a ticket's state badge; review states get their own."""
    if "review" in node.state.name.lower():
        return "magenta"
    return STATUS_STYLES[node.state.category]


def _prompt(state: SessionState) -> Text:
    line = Text()
    if state.mode is Mode.SEARCH:
        line.append("/ ", style="bold cyan")
        if state.search_query:
            line.append(state.search_query)
            line.append(CURSOR, style="cyan")
        else:
            line.append(CURSOR, style="cyan")
            line.append(SEARCH_PLACEHOLDER, style="dim")
    else:
        line.append("> ", style="bold cyan")
        if state.repo_name:
            line.append(f"{state.repo_name}/", style="cyan")
        focused = state.mode is Mode.INPUT
        if state.custom_input_text:
            line.append(state.custom_input_text)
        if focused:
            line.append(CURSOR, style="cyan")
        if not state.custom_input_text:
            line.append(INPUT_PLACEHOLDER, style="dim")
    padding = state.width - line.cell_len - len(state.creation_mode.label) - 1
    line.append(" " * max(padding, 1))
    line.append(state.creation_mode.label, style="dim")
    return line


def _ticket_row(node: TicketNode, selected: bool, flat: bool) -> Text:
    depth = 0 if flat else node.depth
    row = Text("  " * depth)
    row.append("› " if selected else "  ", style="bold cyan")
    if flat or not node.is_expandable:
        row.append("  ")
    else:
        row.append("▼ " if node.expanded else "▶ ", style="dim")
    row.append(node.identifier, style="bold")
    row.append(f" {node.title}")
    if node.state.name:
        row.append(f"  {node.state.name}", style=status_style(node))
    if selected:
        row.stylize("reverse", len("  " * depth))
    return row


def _placeholder_row(state: SessionState, node: TicketNode, selected: bool) -> Text:
    row = Text("  " * node.depth)
    row.append("› " if selected else "  ", style="bold cyan")
    owner = state.tree.find(node.parent_id or "")
    if owner is not None and owner.showing_subtask_entry:
        row.append("+ ", style="green")
        if state.subtask_input_text:
            row.append(state.subtask_input_text)
        row.append(CURSOR, style="green")
        if not state.subtask_input_text:
            row.append(SUBTASK_PLACEHOLDER, style="dim")
        return row
    row.append(node.title, style="reverse green" if selected else "dim green")
    return row


def _ticket_rows(state: SessionState) -> list[Text]:
    if state.loading_tickets:
        return [Text("Loading tickets...", style="dim")]
    if state.tickets_error:
        return [Text(f"Failed to load tickets: {state.tickets_error}", style="red")]
    if not state.tree.roots:
        return [Text("No assigned tickets found", style="dim")]

    if state.mode is Mode.SEARCH:
        if not state.filtered_roots:
            return [Text("No matching tickets", style="dim")]
        return [
            _ticket_row(node, node.id == state.selected_id, flat=True)
            for node in state.filtered_roots
        ]

    rows = []
    for node in visible_nodes(state.tree):
        selected = node.id == state.selected_id
        if node.is_add_child_placeholder:
            rows.append(_placeholder_row(state, node, selected))
        else:
            rows.append(_ticket_row(node, selected, flat=False))
    return rows


def render_frame(state: SessionState) -> Group:
    """Everything on screen for ``state``, top to bottom."""
    if state.mode is Mode.RESULT and state.outcome is not None:
        style = "bold green" if state.outcome.success else "bold red"
        return Group(
            Text(state.outcome.message, style=style),
            Text(""),
            Text("Press any key to exit.", style="dim"),
        )

    lines: list[Text] = [_prompt(state)]
    if state.tickets_enabled:
        lines.append(Text(""))
        lines.extend(_ticket_rows(state))
    if state.notice:
        lines.append(Text(""))
        lines.append(Text(state.notice, style="yellow"))
    return Group(*lines)
