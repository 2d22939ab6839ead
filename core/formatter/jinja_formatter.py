from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError as JinjaTemplateError

from core.contracts.formatter import Formatter
from utils.errors import TemplateError

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class Jinja2Formatter(Formatter):
    def __init__(self, template_dir: Optional[str] = None):
        if template_dir is None:
            # Default template directory relative to this file
            template_dir = str(DEFAULT_TEMPLATE_DIR)

        self.template_dir = template_dir
        try:
            self.env = Environment(
                loader=FileSystemLoader(self.template_dir),
                undefined=StrictUndefined,
                keep_trailing_newline=True,
                trim_blocks=True,
                lstrip_blocks=True,
            )
        except Exception as e:
            raise TemplateError(f"Failed to initialize Jinja2 environment: {e}") from e

    def render(self, template_name: str, **context: Any) -> str:
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e
