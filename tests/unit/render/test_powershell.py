"""Tests for PowerShell job script rendering."""

from pathlib import Path

import pytest

from batch_encoder.config.models import ToolPathsConfig
from batch_encoder.introspector import normalize
from batch_encoder.models import JobRequest, Stage, StageKind, ToolId
from batch_encoder.planner import compile_plan
from batch_encoder.render import PowerShellRenderer, quote_arg, to_windows_path

SOURCE = "C:/Media/movie.mkv"


@pytest.fixture
def scenario_plan(scenario_probe, profile_table):
    request = JobRequest(target=SOURCE, work_dir="D:/encodes")
    return compile_plan(normalize(scenario_probe, SOURCE), request, profile_table)


class TestQuoteArg:
    """Tests for quote_arg function."""

    @pytest.mark.parametrize(
        "arg",
        ["--cqp", "20", "0:v:0", "C:\\Media\\movie.mkv", "language=eng", "-c:a"],
    )
    def test_safe_arguments_unquoted(self, arg):
        assert quote_arg(arg) == arg

    def test_spaces_quoted(self):
        assert quote_arg("title=My Film") == '"title=My Film"'

    def test_special_characters_escaped(self):
        """Backticks, double quotes and dollars are escaped with a backtick."""
        assert quote_arg('a"$`') == '"a`"`$``"'

    def test_filter_graph_quoted(self):
        assert quote_arg("pan=stereo|FL=FL") == '"pan=stereo|FL=FL"'

    def test_empty_argument(self):
        assert quote_arg("") == '""'


class TestRenderStage:
    """Tests for PowerShellRenderer.render_stage."""

    def test_only_plan_paths_converted(self):
        """Arguments that are not plan paths keep their slashes."""
        stage = Stage(
            kind=StageKind.AUDIO_ENCODE,
            tool=ToolId.FFMPEG,
            args=("-i", "C:/in/a.mkv", "-metadata", "title=AC/DC", "out/a.opus"),
        )
        line = PowerShellRenderer().render_stage(stage, {"C:/in/a.mkv", "out/a.opus"})
        assert line == [
            "& ffmpeg.exe -i C:\\in\\a.mkv -metadata title=AC/DC out\\a.opus"
        ]

    def test_configured_executable_quoted(self):
        tools = ToolPathsConfig(ffmpeg="C:/Program Files/ffmpeg/bin/ffmpeg.exe")
        stage = Stage(kind=StageKind.MUX, tool=ToolId.FFMPEG, args=("-version",))
        line = PowerShellRenderer(tools).render_stage(stage)
        assert line == ['& "C:\\Program Files\\ffmpeg\\bin\\ffmpeg.exe" -version']

    def test_cleanup_lines(self):
        stage = Stage(
            kind=StageKind.CLEANUP,
            tool=ToolId.REMOVE,
            args=("out/a b.opus", "out/a.h265"),
        )
        assert PowerShellRenderer().render_stage(stage) == [
            'Remove-Item -LiteralPath "out\\a b.opus"',
            "Remove-Item -LiteralPath out\\a.h265",
        ]

    def test_remove_has_no_executable(self):
        with pytest.raises(ValueError):
            PowerShellRenderer().executable(ToolId.REMOVE)


class TestRender:
    """Tests for PowerShellRenderer.render."""

    def test_scenario_scripts(self, scenario_plan):
        scripts = PowerShellRenderer().render([scenario_plan])

        assert list(scripts) == ["vid", "aud", "mux", "del"]
        assert len(scripts["vid"]) == 1
        assert scripts["vid"][0].startswith("& NVEncC64.exe --vbrhq 1200 ")
        assert scripts["vid"][0].endswith(
            "-i C:\\Media\\movie.mkv -o D:\\encodes\\movie.h265"
        )
        assert scripts["aud"] == [
            "& ffmpeg.exe -i C:\\Media\\movie.mkv -map 0:1 -c:a copy "
            "D:\\encodes\\movie.aac",
            "& ffmpeg.exe -i C:\\Media\\movie.mkv -map 0:2 -c:s copy "
            "D:\\encodes\\movie_eng_2.srt",
        ]
        assert scripts["mux"][0] == (
            "& mkvmerge.exe -o D:\\encodes\\movie__.mkv D:\\encodes\\movie.h265"
        )
        assert scripts["mux"][1].startswith(
            "& ffmpeg.exe -i D:\\encodes\\movie__.mkv -i D:\\encodes\\movie.aac "
        )
        assert scripts["mux"][1].endswith("D:\\encodes\\movie.mkv")
        assert scripts["del"] == [
            "Remove-Item -LiteralPath D:\\encodes\\movie.h265",
            "Remove-Item -LiteralPath D:\\encodes\\movie.aac",
            "Remove-Item -LiteralPath D:\\encodes\\movie__.mkv",
            "Remove-Item -LiteralPath D:\\encodes\\movie_eng_2.srt",
        ]

    def test_copy_mode_has_empty_video_script(self, scenario_probe, profile_table):
        request = JobRequest(target=SOURCE, video_profile="copy")
        plan = compile_plan(normalize(scenario_probe, SOURCE), request, profile_table)
        scripts = PowerShellRenderer().render([plan])
        assert scripts["vid"] == []
        assert len(scripts["mux"]) == 1

    def test_plans_append_in_batch_order(self, scenario_plan, hdr_probe, profile_table):
        other = compile_plan(
            normalize(hdr_probe, "C:/Media/uhd.mkv"),
            JobRequest(target="C:/Media/uhd.mkv"),
            profile_table,
        )
        scripts = PowerShellRenderer().render([scenario_plan, other])
        assert "movie" in scripts["vid"][0]
        assert "uhd" in scripts["vid"][1]


class TestWriteScripts:
    """Tests for PowerShellRenderer.write_scripts."""

    def test_writes_four_scripts(self, scenario_plan, temp_dir: Path):
        job_dir = temp_dir / "jobs"
        written = PowerShellRenderer().write_scripts([scenario_plan], job_dir, "run1")

        assert [p.name for p in written] == [
            "run1_vid.ps1",
            "run1_aud.ps1",
            "run1_mux.ps1",
            "run1_del.ps1",
        ]
        raw = (job_dir / "run1_aud.ps1").read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        text = (job_dir / "run1_aud.ps1").read_text(encoding="utf-8-sig")
        assert text.count("\n") == 2

    def test_rewrites_previous_scripts(self, scenario_plan, temp_dir: Path):
        renderer = PowerShellRenderer()
        renderer.write_scripts([scenario_plan, scenario_plan], temp_dir, "job")
        renderer.write_scripts([scenario_plan], temp_dir, "job")

        text = (temp_dir / "job_vid.ps1").read_text(encoding="utf-8-sig")
        assert text.count("\n") == 1

    def test_empty_batch_writes_empty_scripts(self, temp_dir: Path):
        written = PowerShellRenderer().write_scripts([], temp_dir, "empty")
        assert all(p.read_text(encoding="utf-8-sig") == "" for p in written)


class TestToWindowsPath:
    def test_converts_slashes(self):
        assert to_windows_path("D:/a/b.mkv") == "D:\\a\\b.mkv"
