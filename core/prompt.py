from typing import Optional

from core.contracts.formatter import Formatter
from core.contracts.models import CommitBatch
from core.formatter.jinja_formatter import Jinja2Formatter

RECORD_SEPARATOR = "\n\n---\n\n"
DEFAULT_PROMPT_TEMPLATE = "prompt.j2"


def join_diffs(batch: CommitBatch) -> str:
    """Joins the batch's diffs with a horizontal rule, keeping the batch order."""
    return RECORD_SEPARATOR.join(record.diff for record in batch.records)


def assemble(
    batch: CommitBatch,
    formatter: Optional[Formatter] = None,
    template_name: str = DEFAULT_PROMPT_TEMPLATE,
) -> str:
    """
    Builds the instruction payload for the generation back end.

    Args:
        batch: The commits to describe, most recent first.
        formatter: Renders the instruction template; defaults to the bundled templates.
        template_name: The prompt template to render.

    Returns:
        The prompt text. Identical batches give identical prompts.
    """
    formatter = formatter or Jinja2Formatter()
    return formatter.render(template_name, diffs=join_diffs(batch))
