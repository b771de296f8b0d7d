from __future__ import annotations

from api_response.config_models import load_config
from api_response.http.client import ApiClient
from api_response.utils.logging import setup_logging


def build_client(config_path: str) -> ApiClient:
    """
    Load a YAML configuration, set up logging from it and build a client.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        An ApiClient using the requests transport.
    """
    config = load_config(config_path)
    setup_logging(config.logging.config_path, level=config.logging.level)
    return ApiClient.from_config(config.client)
