"""Configuration module -- exports Settings and load_config.

No module-level settings instance is created; the host
application builds one ``Settings`` and passes it to the factory.
"""

from smartocr.config.loader import load_config
from smartocr.config.settings import Settings

__all__ = ["Settings", "load_config"]
