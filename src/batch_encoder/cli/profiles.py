"""CLI profiles command: list available encoder profiles."""

import json
from pathlib import Path
from typing import Any

import click

from batch_encoder.cli.output import error_exit, exit_code_for
from batch_encoder.cli.profile_table import load_profile_table
from batch_encoder.exceptions import BatchEncoderError
from batch_encoder.profiles import (
    COPY_MARKER,
    FixedProfile,
    ProfileTable,
    ProfileTemplate,
)


def _template_to_dict(template: ProfileTemplate) -> dict[str, Any]:
    if isinstance(template, FixedProfile):
        return {"options": template.options, "extension": template.extension}
    return {
        "options": template.template,
        "extension": template.extension,
        "parameters": {
            p.name: {"aliases": list(p.aliases), "default": p.default}
            for p in template.parameters
        },
    }


def table_to_dict(table: ProfileTable) -> dict[str, Any]:
    """Format a profile table for JSON output."""
    return {
        "video": {k: _template_to_dict(v) for k, v in sorted(table.video.items())},
        "audio": {k: _template_to_dict(v) for k, v in sorted(table.audio.items())},
    }


def _describe(template: ProfileTemplate) -> str:
    if isinstance(template, FixedProfile):
        return template.options
    params = ", ".join(
        f"--{p.aliases[0]}={p.default}" for p in template.parameters if p.aliases
    )
    return f"{template.template}  [{params}]"


def format_table_human(table: ProfileTable) -> str:
    """Format a profile table for terminal output."""
    lines = ["Video profiles:"]
    for key, template in sorted(table.video.items()):
        if key == COPY_MARKER:
            lines.append(f"  {key}: (stream copy, no encode)")
        else:
            lines.append(f"  {key}: {_describe(template)}")
    lines.append("")
    lines.append("Audio profiles:")
    for key, template in sorted(table.audio.items()):
        lines.append(f"  {key}: {_describe(template)}")
    return "\n".join(lines)


@click.command("profiles")
@click.option(
    "--profiles",
    "profiles_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML file adding or overriding profiles.",
)
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
@click.pass_context
def profiles_command(
    ctx: click.Context, profiles_path: Path | None, json_output: bool
) -> None:
    """List available video and audio profiles."""
    try:
        table = load_profile_table(ctx.obj["config"], profiles_path)
    except BatchEncoderError as e:
        error_exit(e.message, exit_code_for(e), json_output)

    if json_output:
        click.echo(json.dumps(table_to_dict(table), indent=2))
    else:
        click.echo(format_table_human(table))
