from config.models import BackendConfig
from core.contracts.provider import GenerationBackend
from core.registry import backend_registry
from utils.errors import ConfigurationError, WorklogException

def get_backend(config: BackendConfig) -> GenerationBackend:
    """
    Factory function to get a generation back end based on the config.

    Args:
        config: The back end configuration.

    Returns:
        An instance of a class that implements the GenerationBackend protocol.

    Raises:
        ConfigurationError: If the back end is unknown or cannot be created.
    """
    try:
        return backend_registry.create(config.provider, config=config)
    except KeyError:
        available = backend_registry.available()
        raise ConfigurationError(
            f"Unknown back end '{config.provider}'. "
            f"Available back ends: {available}"
        )
    except WorklogException:
        raise
    except Exception as e:
        raise ConfigurationError(f"Failed to create back end '{config.provider}': {e}") from e
