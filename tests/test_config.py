import io
import json
from pathlib import Path

import pytest

from config import logic
from config.loader import load_config
from config.logic import deep_merge, load_and_merge_configs, registry_path
from config.models import Config, ProjectRegistry
from config.projects import get_active_project, load_registry, save_registry, set_active_project
from utils.errors import ConfigurationError


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "projects.json"
    path.write_text(json.dumps({
        "projects": {"p": "/repo", "q": "~/work/q"},
        "activeProject": "p",
    }))
    return path


def test_load_config_substitutes_env_vars(monkeypatch):
    monkeypatch.setenv("LLM_BIN", "/opt/llm")
    config = load_config(io.StringIO("backend:\n  command: ${LLM_BIN}/gemini\n"))
    assert config == {"backend": {"command": "/opt/llm/gemini"}}


def test_load_config_missing_env_var(monkeypatch):
    monkeypatch.delenv("NOPE_NOT_SET", raising=False)
    with pytest.raises(ConfigurationError, match="NOPE_NOT_SET"):
        load_config(io.StringIO("backend:\n  command: ${NOPE_NOT_SET}\n"))


def test_load_config_rejects_bad_yaml():
    with pytest.raises(ConfigurationError):
        load_config(io.StringIO("backend: [unclosed"))


def test_load_config_empty_file():
    assert load_config(io.StringIO("")) == {}


def test_deep_merge_replaces_lists():
    merged = deep_merge(
        {"backend": {"command": "gemini", "args": ["a"]}, "history": {"max_commits": 10}},
        {"backend": {"args": ["b", "c"]}},
    )
    assert merged == {"backend": {"command": "gemini", "args": ["b", "c"]}, "history": {"max_commits": 10}}


def test_defaults_match_bundled_yaml(monkeypatch, tmp_path):
    monkeypatch.setattr(logic, "USER_CONFIG_PATH", tmp_path / "missing.yaml")
    config = load_and_merge_configs()
    assert config == Config()
    assert config.history.max_commits == 10
    assert config.backend.command == "gemini"
    assert config.backend.timeout_sec is None


def test_custom_config_overrides(tmp_path):
    custom = tmp_path / "custom.yaml"
    custom.write_text("history:\n  max_commits: 3\nbackend:\n  timeout_sec: 60\n")
    config = load_and_merge_configs(str(custom))
    assert config.history.max_commits == 3
    assert config.history.context_lines == 3
    assert config.backend.timeout_sec == 60


def test_invalid_config_values(tmp_path):
    custom = tmp_path / "custom.yaml"
    custom.write_text("history:\n  max_commits: 0\n")
    with pytest.raises(ConfigurationError, match="validation failed"):
        load_and_merge_configs(str(custom))


def test_registry_path_prefers_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("WORKLOG_CONFIG", str(tmp_path / "env.json"))
    assert registry_path(Config()) == tmp_path / "env.json"
    monkeypatch.delenv("WORKLOG_CONFIG")
    assert registry_path(Config()) == Path.home() / ".worklogs" / "projects.json"


def test_load_registry(registry_file):
    registry = load_registry(registry_file)
    assert registry.projects == {"p": "/repo", "q": "~/work/q"}
    assert registry.active_project == "p"
    assert registry.worklog_folder_name == "worklogs"


def test_load_registry_missing(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_registry(tmp_path / "nope.json")


def test_load_registry_invalid_json(tmp_path):
    path = tmp_path / "projects.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError, match="invalid"):
        load_registry(path)


def test_empty_folder_name_uses_default():
    registry = ProjectRegistry.model_validate({"projects": {}, "worklogFolderName": ""})
    assert registry.worklog_folder_name == "worklogs"


def test_active_project_context(registry_file):
    project = get_active_project(load_registry(registry_file))
    assert project.name == "p"
    assert project.repo_path == Path("/repo")
    assert project.output_dir == Path("/repo/worklogs")


def test_active_project_path_is_expanded(registry_file):
    registry = load_registry(registry_file)
    registry.active_project = "q"
    assert get_active_project(registry).repo_path == Path.home() / "work" / "q"


def test_active_project_unset():
    with pytest.raises(ConfigurationError, match="No activeProject"):
        get_active_project(ProjectRegistry(projects={"p": "/repo"}))


def test_active_project_path_missing():
    with pytest.raises(ConfigurationError, match="Project path missing for gone"):
        get_active_project(ProjectRegistry(projects={"p": "/repo"}, active_project="gone"))


def test_set_active_project_persists(registry_file):
    set_active_project(registry_file, "q")
    data = json.loads(registry_file.read_text())
    assert data["activeProject"] == "q"
    assert data["projects"] == {"p": "/repo", "q": "~/work/q"}


def test_set_active_unknown_project(registry_file):
    with pytest.raises(ConfigurationError, match="Unknown project: zzz"):
        set_active_project(registry_file, "zzz")
    assert json.loads(registry_file.read_text())["activeProject"] == "p"


def test_save_registry_keeps_unknown_keys(tmp_path):
    registry = ProjectRegistry.model_validate({"projects": {"p": "/repo"}, "owner": "me"})
    path = tmp_path / "nested" / "projects.json"
    save_registry(registry, path)
    data = json.loads(path.read_text())
    assert data["owner"] == "me"
    assert data["worklogFolderName"] == "worklogs"
    assert "activeProject" not in data
