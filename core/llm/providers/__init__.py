# Importing the modules registers each back end with backend_registry.
from . import cli_backend, dummy_provider, local

__all__ = ["cli_backend", "dummy_provider", "local"]
