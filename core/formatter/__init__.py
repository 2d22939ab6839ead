from .jinja_formatter import Jinja2Formatter

__all__ = ["Jinja2Formatter"]
