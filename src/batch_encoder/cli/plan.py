"""CLI plan command: probe sources and write PowerShell job scripts."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from batch_encoder.batch import BatchPlanner
from batch_encoder.cli.exit_codes import ExitCode
from batch_encoder.cli.output import error_exit, exit_code_for
from batch_encoder.cli.profile_table import load_profile_table
from batch_encoder.config import EncoderConfig
from batch_encoder.discovery import from_msys_path, resolve_targets
from batch_encoder.exceptions import BatchEncoderError
from batch_encoder.introspector import FFprobeIntrospector
from batch_encoder.models import JobRequest, VppMode
from batch_encoder.render import (
    OutputStyle,
    PowerShellRenderer,
    format_plan_human,
    plan_to_dict,
)

logger = logging.getLogger(__name__)


def parse_extra_args(args: list[str]) -> dict[str, str | bool]:
    """Parse leftover --key=value options into template arguments.

    A bare --key becomes True, which parametrized profiles reject.

    Raises:
        click.UsageError: If an argument is not of the --key[=value] form.
    """
    extra: dict[str, str | bool] = {}
    for arg in args:
        if not arg.startswith("--") or len(arg) == 2:
            raise click.UsageError(f"Unexpected argument: {arg}")
        key, sep, value = arg[2:].partition("=")
        extra[key] = value if sep else True
    return extra


def parse_lang_list(value: str | None) -> frozenset[str]:
    """Split a comma-separated language list."""
    if not value:
        return frozenset()
    return frozenset(code.strip() for code in value.split(",") if code.strip())


def build_request(
    config: EncoderConfig,
    path: str,
    prefix: str,
    video: str,
    audio: str,
    resize: str,
    crop: str,
    vpp: str,
    lang: str | None,
    default_lang: str | None,
    title: str | None,
    out_path: str | None,
    extra_args: dict[str, str | bool],
) -> JobRequest:
    """Assemble the batch-wide JobRequest from CLI values and config."""
    work_dir = from_msys_path(out_path) if out_path else config.paths.work_dir
    return JobRequest(
        target=from_msys_path(path),
        prefix=prefix,
        work_dir=work_dir,
        video_profile=video,
        audio_profile=audio,
        resize=resize,
        crop=crop,
        vpp=vpp,
        lang_filter=parse_lang_list(lang),
        default_lang=default_lang or None,
        title=title,
        extra_args=extra_args,
    )


@click.command(
    "plan",
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.option("--path", "path", required=True, help="Source file or directory.")
@click.option(
    "--prefix", required=True, help="Job script name prefix (e.g. 'movies')."
)
@click.option("--video", default="default", show_default=True, help="Video profile.")
@click.option("--audio", default="default", show_default=True, help="Audio profile.")
@click.option("--resize", default="", help="Output size, WxH (e.g. 1280x720).")
@click.option("--crop", default="", help="Crop in pixels, L,T,R,B.")
@click.option(
    "--vpp",
    default=VppMode.EDGE.value,
    show_default=True,
    help="Post-processing: none, edge, deband or both.",
)
@click.option("--lang", default=None, help="Audio languages to keep (e.g. eng,jpn).")
@click.option(
    "--default-lang", default=None, help="Language of the default audio track."
)
@click.option(
    "--title", default=None, help="Title metadata; an empty value strips it."
)
@click.option("--out-path", default=None, help="Directory for encodes and outputs.")
@click.option(
    "--job-path",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory for the generated .ps1 scripts.",
)
@click.option("--recursive", is_flag=True, help="Scan subdirectories.")
@click.option(
    "--profiles",
    "profiles_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML file adding or overriding profiles.",
)
@click.option(
    "--dry-run", is_flag=True, help="Show the plans without writing scripts."
)
@click.option("--json", "json_output", is_flag=True, help="Output plans as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Show every stage.")
@click.pass_context
def plan_command(
    ctx: click.Context,
    path: str,
    prefix: str,
    video: str,
    audio: str,
    resize: str,
    crop: str,
    vpp: str,
    lang: str | None,
    default_lang: str | None,
    title: str | None,
    out_path: str | None,
    job_path: Path | None,
    recursive: bool,
    profiles_path: Path | None,
    dry_run: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Plan a batch of encodes.

    Extra --key=value options fill profile template parameters, e.g.
    --video=cqp --q=22 or --audio=opus-stereo --bitaud=128k.
    """
    config: EncoderConfig = ctx.obj["config"]
    extra_args = parse_extra_args(ctx.args)

    try:
        request = build_request(
            config,
            path=path,
            prefix=prefix,
            video=video,
            audio=audio,
            resize=resize,
            crop=crop,
            vpp=vpp,
            lang=lang,
            default_lang=default_lang,
            title=title,
            out_path=out_path,
            extra_args=extra_args,
        )
        table = load_profile_table(config, profiles_path)
        planner = BatchPlanner(table, FFprobeIntrospector(config.tools.ffprobe))
        planner.validate(request)
        files = resolve_targets(request.target, recursive)
        plans = planner.plan_files(request, files)
    except BatchEncoderError as e:
        error_exit(e.message, exit_code_for(e), json_output)

    style = OutputStyle.VERBOSE if verbose else OutputStyle.NORMAL
    written: list[Path] = []
    if not dry_run:
        renderer = PowerShellRenderer(config.tools)
        try:
            written = renderer.write_scripts(
                plans, job_path or config.paths.job_dir, prefix
            )
        except OSError as e:
            error_exit(
                f"Failed to write job scripts: {e}",
                ExitCode.OPERATION_FAILED,
                json_output,
            )

    if json_output:
        payload = {
            "status": "dry_run" if dry_run else "written",
            "plans": [plan_to_dict(p) for p in plans],
            "scripts": [str(p) for p in written],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    for plan in plans:
        click.echo(format_plan_human(plan, style))
        click.echo("")

    if dry_run:
        click.echo(f"Dry run: {len(plans)} file(s) planned, no scripts written.")
    else:
        click.echo("Done. Created:")
        for script in written:
            click.echo(f"- {script}")
