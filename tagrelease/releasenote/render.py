"""Turning grouped change requests into the release body."""

from typing import List, Mapping, Sequence

from ..config.changelog import Configuration
from ..models import ChangeRequest


def render_section(config: Configuration, title: str, requests: Sequence[ChangeRequest]) -> str:
    """Render one section block: heading followed by one line per request."""
    lines = ["\n## " + title + "\n"]
    lines.extend(config.line_template(request) for request in requests)
    return "\n".join(lines)


def render(config: Configuration, grouped: Mapping[str, Sequence[ChangeRequest]]) -> str:
    """Assemble header, section blocks and footer.

    Sections are emitted in configuration order and only when non-empty.
    Groups without a configured section are not rendered. When no block is
    left the no-changes message takes their place.
    """
    blocks: List[str] = []
    for section in config.sections:
        requests = grouped.get(section.title, ())
        if requests:
            blocks.append(render_section(config, section.title, requests))

    segments: List[str] = []
    if config.header:
        segments.append(config.header)
    segments.append("\n".join(blocks) if blocks else config.no_changes_message)
    if config.footer:
        segments.append(config.footer)
    return "\n".join(segments)
