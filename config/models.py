from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict, Any

DEFAULT_WORKLOG_FOLDER = "worklogs"

class RegistryConfig(BaseModel):
    path: str = Field("~/.worklogs/projects.json", description="项目注册表 JSON 文件路径")

class HistoryConfig(BaseModel):
    max_commits: int = Field(10, gt=0, description="每次生成最多读取的提交数")
    context_lines: int = Field(3, ge=0, description="diff 上下文行数")
    max_output_bytes: int = Field(20 * 1024 * 1024, gt=0, description="单个 diff 的最大字节数")

class BackendConfig(BaseModel):
    provider: str = "cli"
    command: str = "gemini"
    args: List[str] = Field(default_factory=lambda: ["--model=gemini-2.5-pro"])
    name: str = "llama3"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout_sec: Optional[float] = Field(None, gt=0, description="为空时无限等待")
    parameters: Dict[str, Any] = Field(default_factory=dict)

class OutputConfig(BaseModel):
    extension: str = ".md"
    template_dir: Optional[str] = None
    prompt_template: str = "prompt.j2"
    worklog_template: str = "worklog.md.j2"

class Config(BaseModel):
    registry: RegistryConfig = Field(default_factory=RegistryConfig, description="项目注册表相关配置")
    history: HistoryConfig = Field(default_factory=HistoryConfig, description="Git 历史读取相关配置")
    backend: BackendConfig = Field(default_factory=BackendConfig, description="生成后端相关配置")
    output: OutputConfig = Field(default_factory=OutputConfig, description="输出相关配置")


class ProjectRegistry(BaseModel):
    """The on-disk project registry, keyed the way the JSON file spells it."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    projects: Dict[str, str] = Field(default_factory=dict)
    active_project: Optional[str] = Field(None, alias="activeProject")
    worklog_folder_name: str = Field(DEFAULT_WORKLOG_FOLDER, alias="worklogFolderName")

    @field_validator("worklog_folder_name", mode="before")
    @classmethod
    def _default_folder(cls, value: Any) -> Any:
        return value or DEFAULT_WORKLOG_FOLDER
