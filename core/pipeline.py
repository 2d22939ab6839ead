import asyncio
from datetime import date
from typing import Optional

from config.models import Config
from core.collectors.history_collector import HistoryCollector
from core.contracts.collector import Collector
from core.contracts.formatter import Formatter
from core.contracts.models import ProjectContext, TimeWindow, WorklogReport, WorklogResult
from core.contracts.provider import GenerationBackend, ProgressCallback
from core.formatter.jinja_formatter import Jinja2Formatter
from core.llm.router import get_backend
from core.prompt import assemble
from core.writer import WorklogWriter
from utils.logger import logger


class WorklogGenerator:
    """
    The main pipeline for generating worklogs.
    It runs history collection, prompt assembly, generation and writing in order.
    """

    def __init__(
        self,
        config: Config,
        project: ProjectContext,
        backend: Optional[GenerationBackend] = None,
        collector: Optional[Collector] = None,
        formatter: Optional[Formatter] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        """
        Initializes the pipeline for one project.

        Args:
            config: The configuration object.
            project: The project whose history is summarized.
            backend: Generation back end; built from `config.backend` when omitted.
            collector: History source; a HistoryCollector from `config.history` when omitted.
            formatter: Template renderer for the prompt and the worklog file.
            progress: Optional callback receiving short status messages.
        """
        self.config = config
        self.project = project
        self.progress = progress
        self.formatter = formatter or Jinja2Formatter(template_dir=config.output.template_dir)
        self.collector = collector or HistoryCollector(
            max_commits=config.history.max_commits,
            context_lines=config.history.context_lines,
            max_output_bytes=config.history.max_output_bytes,
        )
        self.backend = backend or get_backend(config.backend)
        self.writer = WorklogWriter(
            formatter=self.formatter,
            template_name=config.output.worklog_template,
            extension=config.output.extension,
        )

    def _notify(self, message: str) -> None:
        if self.progress:
            self.progress(message)

    async def generate(self, window: TimeWindow, today: Optional[date] = None) -> WorklogResult:
        """
        Generates and saves the worklog for every commit since `window`.

        Args:
            window: Lower bound for the commits to include.
            today: Date used to name the worklog file; defaults to the local date.

        Returns:
            The result; its `path` is None when the window had no commits.
        """
        logger.info(f"Starting worklog generation for '{self.project.name}' since {window}...")

        # 1. Collect history
        self._notify(f"Reading commits of {self.project.name}...")
        batch = await asyncio.to_thread(self.collector.collect, self.project.repo_path, window)
        if batch.is_empty:
            logger.info(f"No commits found since {window}; nothing to generate.")
            return WorklogResult(project=self.project, window=window)

        # 2. Build the prompt
        prompt = assemble(batch, formatter=self.formatter, template_name=self.config.output.prompt_template)
        logger.debug(f"Generated prompt for back end:\n{prompt}")

        # 3. Generate
        self._notify(f"Generating worklog from {len(batch.records)} commits...")
        output = await self.backend.generate(prompt, progress=self.progress)

        # 4. Save
        report = WorklogReport(content=output)
        path = self.writer.write(self.project, report, today or date.today())
        logger.success("Worklog generation pipeline completed successfully!")
        return WorklogResult(
            project=self.project,
            window=window,
            commit_count=len(batch.records),
            path=path,
        )
