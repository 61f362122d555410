"""Configuration module for chatroute."""

from chatroute.config.loader import (
    load_config,
    save_config,
    get_config_path,
    get_chatroute_home,
)
from chatroute.config.schema import ActionConstraints, Config, ListenerConfig

__all__ = [
    "ActionConstraints",
    "Config",
    "ListenerConfig",
    "load_config",
    "save_config",
    "get_config_path",
    "get_chatroute_home",
]
