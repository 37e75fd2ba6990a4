"""
One-call setup from configuration.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from .config.loader import load_config
from .config.models import GlobalConfig
from .ipc.tags import IPC_CLIENT_CALL, IPC_TAG_KEYS
from .logging.manager import setup_logging
from .monitoring.clock import Clock
from .monitoring.registry import Registry, configure_registry

logger = logging.getLogger(__name__)


def configure(
    config: Optional[GlobalConfig] = None,
    config_file: Optional[Union[str, Path]] = None,
    clock: Optional[Clock] = None,
    **backend_kwargs: Any,
) -> Registry:
    """
    Set up logging and install a global registry.

    Args:
        config: Configuration to apply (loaded from files and environment if None)
        config_file: Specific config file to load when ``config`` is None
        clock: Timestamp source for the registry
        **backend_kwargs: Extra backend-specific settings, e.g. a Prometheus
            ``registry``

    Returns:
        The registry now returned by ``get_registry()``
    """
    if config is None:
        config = load_config(config_file)

    setup_logging(config.logging)

    # Prometheus needs the full tag set of the call timer up front
    label_names = {
        IPC_CLIENT_CALL: sorted(set(IPC_TAG_KEYS) | set(config.metrics.common_tags)),
    }
    registry = Registry.from_config(
        config.metrics, clock=clock, label_names=label_names, **backend_kwargs
    )
    configure_registry(registry)

    logger.info(
        "Metrics registry configured with backends: %s",
        ", ".join(type(backend).__name__ for backend in registry.backends),
    )
    return registry
