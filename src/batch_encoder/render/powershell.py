"""PowerShell job script rendering.

Plans are compiled with forward-slash paths; the renderer converts them to
Windows syntax and groups stages into four scripts that are run in order:

    <prefix>_vid.ps1   video encodes
    <prefix>_aud.ps1   audio encodes and subtitle extracts
    <prefix>_mux.ps1   premuxes and final muxes
    <prefix>_del.ps1   intermediate cleanup

Every run replaces previously generated scripts of the same prefix.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from batch_encoder.config.models import ToolPathsConfig
from batch_encoder.models import Plan, Stage, StageKind, ToolId

logger = logging.getLogger(__name__)

# Arguments made only of these characters need no quoting
_SAFE_ARG = re.compile(r"^[A-Za-z0-9_\-.:=/\\+]+$")

# Characters PowerShell interprets inside double quotes
_ESCAPED_CHARS = ("`", '"', "$")

SCRIPT_SUFFIXES: dict[StageKind, str] = {
    StageKind.VIDEO_ENCODE: "vid",
    StageKind.AUDIO_ENCODE: "aud",
    StageKind.SUBTITLE_EXTRACT: "aud",
    StageKind.PREMUX: "mux",
    StageKind.MUX: "mux",
    StageKind.CLEANUP: "del",
}
SCRIPT_ORDER = ("vid", "aud", "mux", "del")

SCRIPT_ENCODING = "utf-8-sig"


def to_windows_path(path: str) -> str:
    """Convert a forward-slash path to Windows syntax."""
    return path.replace("/", "\\")


def quote_arg(arg: str) -> str:
    """Quote one argument for a PowerShell command line."""
    if _SAFE_ARG.match(arg):
        return arg
    for char in _ESCAPED_CHARS:
        arg = arg.replace(char, f"`{char}")
    return f'"{arg}"'


def plan_paths(plan: Plan) -> frozenset[str]:
    """Collect every file path a plan refers to."""
    paths = {plan.source, plan.output, *plan.cleanup}
    for stage in plan.stages:
        paths.update(i.path for i in stage.inputs)
        if stage.output is not None:
            paths.add(stage.output)
    return frozenset(paths)


class PowerShellRenderer:
    """Render plans as PowerShell command lines."""

    def __init__(self, tools: ToolPathsConfig | None = None) -> None:
        """Initialize the renderer.

        Args:
            tools: Executables to invoke; defaults to ToolPathsConfig().
        """
        self._tools = tools or ToolPathsConfig()

    def executable(self, tool: ToolId) -> str:
        """Map a tool id to its configured executable."""
        if tool == ToolId.NVENC:
            return self._tools.nvenc
        if tool == ToolId.FFMPEG:
            return self._tools.ffmpeg
        if tool == ToolId.MKVMERGE:
            return self._tools.mkvmerge
        raise ValueError(f"Tool {tool.value} has no executable")

    def render_stage(self, stage: Stage, paths: Iterable[str] = ()) -> list[str]:
        """Render one stage as PowerShell lines.

        Args:
            stage: Stage to render.
            paths: Arguments to convert to Windows path syntax.

        Returns:
            One line for a tool invocation, one per file for cleanup.
        """
        paths = frozenset(paths)

        def convert(arg: str) -> str:
            return quote_arg(to_windows_path(arg) if arg in paths else arg)

        if stage.tool == ToolId.REMOVE:
            return [
                f"Remove-Item -LiteralPath {quote_arg(to_windows_path(p))}"
                for p in stage.args
            ]

        exe = quote_arg(to_windows_path(self.executable(stage.tool)))
        args = " ".join(convert(arg) for arg in stage.args)
        return [f"& {exe} {args}"]

    def render(self, plans: Sequence[Plan]) -> dict[str, list[str]]:
        """Render plans into script bodies keyed by script suffix."""
        scripts: dict[str, list[str]] = {suffix: [] for suffix in SCRIPT_ORDER}
        for plan in plans:
            paths = plan_paths(plan)
            for stage in plan.stages:
                suffix = SCRIPT_SUFFIXES[stage.kind]
                scripts[suffix].extend(self.render_stage(stage, paths))
        return scripts

    def write_scripts(
        self, plans: Sequence[Plan], job_dir: Path, prefix: str
    ) -> list[Path]:
        """Write the four job scripts, replacing any previous ones.

        Args:
            plans: Plans in batch order.
            job_dir: Directory receiving the scripts; created if missing.
            prefix: File name prefix distinguishing batches.

        Returns:
            Paths of the written scripts, in run order.
        """
        job_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for suffix, lines in self.render(plans).items():
            script = job_dir / f"{prefix}_{suffix}.ps1"
            body = "".join(f"{line}\n" for line in lines)
            script.write_text(body, encoding=SCRIPT_ENCODING)
            logger.debug("Wrote %s (%d lines)", script, len(lines))
            written.append(script)
        return written
