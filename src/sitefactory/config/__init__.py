from sitefactory.config.hierarchy import load_config_hierarchy
from sitefactory.config.schema import Settings, is_placeholder_key, load_settings

__all__ = ["Settings", "is_placeholder_key", "load_config_hierarchy", "load_settings"]
