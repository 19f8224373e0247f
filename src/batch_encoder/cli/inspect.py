"""CLI inspect command: show the normalized descriptor of a media file."""

import json
from pathlib import Path

import click

from batch_encoder.cli.exit_codes import ExitCode
from batch_encoder.cli.output import error_exit
from batch_encoder.discovery import from_msys_path
from batch_encoder.exceptions import ProbeFailure
from batch_encoder.introspector import FFprobeIntrospector, normalize
from batch_encoder.render import descriptor_to_dict, format_descriptor_human


@click.command("inspect")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json"]),
    default="human",
    help="Output format (default: human)",
)
@click.pass_context
def inspect_command(ctx: click.Context, file: str, output_format: str) -> None:
    """Inspect a media file as the planner sees it.

    FILE is the path to the media file to inspect.
    """
    json_output = output_format == "json"
    file_path = Path(from_msys_path(file))
    if not file_path.exists():
        error_exit(
            f"File not found: {file_path}", ExitCode.TARGET_NOT_FOUND, json_output
        )

    introspector = FFprobeIntrospector(ctx.obj["config"].tools.ffprobe)
    try:
        descriptor = normalize(introspector.probe(file_path), str(file_path))
    except ProbeFailure as e:
        error_exit(e.message, ExitCode.OPERATION_FAILED, json_output)

    if json_output:
        click.echo(json.dumps(descriptor_to_dict(descriptor), indent=2))
    else:
        click.echo(format_descriptor_human(descriptor))
