import asyncio
from datetime import date
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

# 导入 providers 以注册生成后端
import core.llm.providers

from config.logic import load_and_merge_configs, registry_path
from config.models import Config
from config.projects import get_active_project, load_registry, set_active_project
from core.contracts.models import ProjectContext, TimeWindow, WorklogResult
from core.pipeline import WorklogGenerator
from core.window import resolve
from utils.errors import WorklogException
from utils.logger import setup_logger, logger


def apply_cli_overrides(config: Config, backend: Optional[str], max_commits: Optional[int]) -> Config:
    """将CLI选项应用于加载的配置"""
    if backend:
        config.backend.provider = backend
        logger.info(f"使用 backend 覆盖配置: {backend}")
    if max_commits:
        config.history.max_commits = max_commits
        logger.info(f"使用 max_commits 覆盖配置: {max_commits}")
    return config


async def run_generation(config: Config, project: ProjectContext, window: TimeWindow, progress) -> WorklogResult:
    """
    初始化并运行工作日志生成流水线
    """
    pipeline = WorklogGenerator(config, project, progress=progress)
    return await pipeline.generate(window, today=date.today())


def fail(ctx: click.Context, console: Console, error: Exception, verbose: bool) -> None:
    """打印错误并以非零状态退出"""
    if isinstance(error, WorklogException):
        logger.opt(exception=verbose).error(f"发生已知错误: {error}")
        console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    else:
        logger.opt(exception=True).error(f"发生未知错误: {error}")
        console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(error))}")
    ctx.exit(1)


@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="启用详细日志记录以进行调试",
)
@click.option(
    "-c", "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="自定义配置文件的路径",
)
@click.pass_context
def cli(ctx, verbose: bool, config_path: Optional[str]):
    """
    根据 Git 提交历史生成工作日志。
    """
    setup_logger(log_level="DEBUG" if verbose else "INFO")
    ctx.obj = {"verbose": verbose, "config_path": config_path}


def _load_config(ctx: click.Context, console: Console) -> Config:
    try:
        return load_and_merge_configs(custom_config_path=ctx.obj["config_path"])
    except WorklogException as e:
        fail(ctx, console, e, ctx.obj["verbose"])


@cli.command("generate")
@click.argument("since", required=False, default="today")
@click.option("--backend", type=str, help="覆盖生成后端 (例如 'cli', 'local')")
@click.option("--max-commits", type=click.IntRange(min=1), help="覆盖最多读取的提交数")
@click.pass_context
def generate(ctx, since: str, backend: Optional[str], max_commits: Optional[int]):
    """
    为当前激活的项目生成工作日志。SINCE 可以是 today、yesterday 或一个日期。
    """
    console = Console()
    verbose = ctx.obj["verbose"]
    config = apply_cli_overrides(_load_config(ctx, console), backend, max_commits)

    try:
        # 1. 读取项目注册表 (在运行任何 git 命令之前)
        project = get_active_project(load_registry(registry_path(config)))
        window = resolve(since)

        # 2. 运行流水线
        with console.status(f"[bold green]Generating worklog for {escape(project.name)}...[/bold green]") as status:
            def progress(message: str) -> None:
                status.update(f"[bold green]{escape(message)}[/bold green]")

            result = asyncio.run(run_generation(config, project, window, progress))
    except Exception as e:
        fail(ctx, console, e, verbose)
        return

    # 3. 处理输出
    if result.path is None:
        console.print(f"[yellow]No commits found since {result.window}[/yellow]")
        return
    console.print(f"[bold green]Saved[/bold green] {escape(str(result.path))}")


@cli.command("list-projects")
@click.pass_context
def list_projects(ctx):
    """
    列出注册表中的所有项目。
    """
    console = Console()
    config = _load_config(ctx, console)
    try:
        registry = load_registry(registry_path(config))
    except WorklogException as e:
        fail(ctx, console, e, ctx.obj["verbose"])
        return

    table = Table(title="Projects")
    table.add_column("Active", justify="center")
    table.add_column("Name", style="cyan")
    table.add_column("Repository")
    for name, repo in registry.projects.items():
        table.add_row("*" if name == registry.active_project else "", escape(name), escape(repo))
    console.print(table)
    console.print(f"activeProject: {escape(str(registry.active_project))}")


@cli.command("set-active")
@click.argument("name")
@click.pass_context
def set_active(ctx, name: str):
    """
    设置当前激活的项目。
    """
    console = Console()
    config = _load_config(ctx, console)
    try:
        set_active_project(registry_path(config), name)
    except WorklogException as e:
        fail(ctx, console, e, ctx.obj["verbose"])
        return
    console.print(f"activeProject set to {escape(name)}")


if __name__ == "__main__":
    cli()
