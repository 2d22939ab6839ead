from datetime import date
from pathlib import Path
from typing import Optional

from core.contracts.formatter import Formatter
from core.contracts.models import ProjectContext, WorklogReport
from core.formatter.jinja_formatter import Jinja2Formatter
from utils.logger import logger


class WorklogWriter:
    """Persists one report per project and date, replacing any earlier one."""

    def __init__(
        self,
        formatter: Optional[Formatter] = None,
        template_name: str = "worklog.md.j2",
        extension: str = ".md",
    ):
        self.formatter = formatter or Jinja2Formatter()
        self.template_name = template_name
        self.extension = extension if extension.startswith(".") else f".{extension}"

    def output_path(self, project: ProjectContext, on: date) -> Path:
        return project.output_dir / f"{on.isoformat()}{self.extension}"

    def write(self, project: ProjectContext, report: WorklogReport, on: date) -> Path:
        """
        Writes the report under `{repo}/{output folder}/{YYYY-MM-DD}.md`.

        Returns:
            The absolute path of the written file.
        """
        path = self.output_path(project, on)
        content = self.formatter.render(
            self.template_name,
            date=on.isoformat(),
            report=report.content.strip(),
        )
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote worklog for {project.name} to {path}")
        return path.resolve()
