"""
reportomatic package initialisation.

The module performs two small tasks:

1. **Expose the version string**
   ``reportomatic.__version__`` is resolved at import-time from the installed
   distribution metadata so that the CLI, the JSON log file and the tests all
   report the same value.

2. **Re-export the YAML loader**
   :func:`reportomatic.config.load_config` is available at the top level::

       from reportomatic import load_config
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("reportomatic")
except PackageNotFoundError:
    # Source checkout without `pip install -e .`
    __version__ = "0.0.0"

from .config import load_config  # noqa: E402 – deliberate late import

__all__: list[str] = ["load_config", "__version__"]
