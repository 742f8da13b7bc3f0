"""
Configuration package façade.

* :func:`load_config` – resolve, merge and validate the three YAML files.
* :class:`HarvestConfig` and its sections – the validated result.
"""

from .loader import load_config  # noqa: F401
from .schema import DriveSettings, HarvestConfig, PortalSettings  # noqa: F401

__all__: list[str] = ["load_config", "HarvestConfig", "PortalSettings", "DriveSettings"]
