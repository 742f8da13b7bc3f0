"""Expose the project-wide Click group for the ``reportomatic-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires common global flags (YAML overrides, verbosity, plain-text log);
* sets up logging via :pyfunc:`reportomatic.utils.logging.setup_logging`;
* loads the merged *settings / organizations / forms* configuration;
* registers every sub-command located in sibling modules, imported lazily.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict

import click
import structlog

from reportomatic import __version__
from reportomatic.config import load_config
from reportomatic.utils.errors import ConfigError
from reportomatic.utils.logging import setup_logging

log = structlog.get_logger()


class LazyGroup(click.Group):
    """Click group that imports sub-commands lazily."""

    def __init__(self, *args, **kwargs):
        self._lazy: dict[str, str] = {}
        super().__init__(*args, **kwargs)

    def set_lazy_command(self, name: str, target: str) -> None:
        """Register *name* to be imported from ``module:attr`` on first use."""
        self._lazy[name] = target

    def list_commands(self, ctx):
        return sorted(set(super().list_commands(ctx)) | set(self._lazy))

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        cmd = getattr(importlib.import_module(module_name), attr)
        self.add_command(cmd, name=cmd_name)
        return cmd


# ─────────────────────────────────────────────────────────────────────────────
# Context settings shared by the entire Click hierarchy
# ─────────────────────────────────────────────────────────────────────────────
_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
reportomatic-cli – harvest portal reports into Google Drive.

""",
)
@click.version_option(__version__)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory searched for settings/organizations/forms YAML (default ./config).",
)
@click.option("--settings-yaml", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--organizations-yaml", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--forms-yaml", type=click.Path(dir_okay=False, path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="Show source locations in console output.")
@click.option("--debug", is_flag=True, help="DEBUG console and JSON logfile.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_dir: Path | None,
    settings_yaml: Path | None,
    organizations_yaml: Path | None,
    forms_yaml: Path | None,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *reportomatic-cli*.

    Raises:
        click.ClickException: When the configuration cannot be loaded.
    """
    # Logging must be configured before any output is produced ----------------
    setup_logging(verbose=verbose, debug=debug, extra_text_log=save_logfile)

    try:
        cfg = load_config(
            settings_path=settings_yaml,
            organizations_path=organizations_yaml,
            forms_path=forms_yaml,
            config_dir=config_dir,
        )
    except ConfigError as exc:
        log.error("config.invalid", error=str(exc))
        raise click.ClickException(str(exc)) from exc

    ctx.obj = {
        "cfg": cfg,
        "verbose": verbose,
        "debug": debug,
    }


main.set_lazy_command("harvest", "reportomatic.cli.harvest:cli")
main.set_lazy_command("authorize", "reportomatic.cli.authorize:cli")

cli = main
__all__: list[str] = ["main"]
