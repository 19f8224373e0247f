"""CLI module for batch-encoder."""

import logging
from pathlib import Path

import click

from batch_encoder.cli.exit_codes import ExitCode
from batch_encoder.cli.output import error_exit
from batch_encoder.config import build_logging_config, get_config
from batch_encoder.exceptions import ConfigError
from batch_encoder.logging import configure_logging

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="batch-encoder")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.batch-encoder/config.toml).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    config_path: Path | None,
) -> None:
    """batch-encoder - Plan NVEncC/ffmpeg batch encodes as PowerShell jobs."""
    ctx.ensure_object(dict)

    try:
        config = get_config(config_path=config_path)
        logging_config = build_logging_config(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except ConfigError as e:
        error_exit(e.message, ExitCode.CONFIG_ERROR)
    except ValueError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR)

    configure_logging(logging_config)
    logger.debug(
        "Configuration: work_dir=%s, job_dir=%s, profiles_file=%s",
        config.paths.work_dir,
        config.paths.job_dir,
        config.profiles_file,
    )
    ctx.obj["config"] = config


# Defer import to avoid circular dependency
def _register_commands():
    from batch_encoder.cli.inspect import inspect_command
    from batch_encoder.cli.plan import plan_command
    from batch_encoder.cli.profiles import profiles_command

    main.add_command(plan_command)
    main.add_command(profiles_command)
    main.add_command(inspect_command)


_register_commands()
