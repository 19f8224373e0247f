"""Tests for profile templates and ProfileResolver."""

import pytest

from batch_encoder.exceptions import UnknownProfileError, ValidationError
from batch_encoder.profiles import (
    COPY_MARKER,
    FixedProfile,
    ParametrizedProfile,
    ProfileParameter,
    ProfileResolver,
    ProfileTable,
)


class TestProfileParameter:
    """Tests for ProfileParameter.lookup."""

    def test_default_when_absent(self):
        """The default is used when no alias is passed."""
        param = ProfileParameter("bitrate", ("bitrate", "bitvid"), "1200")
        assert param.lookup({}) == "1200"

    def test_first_alias_wins(self):
        """Aliases are searched in declaration order."""
        param = ProfileParameter("bitrate", ("bitrate", "bitvid"), "1200")
        assert param.lookup({"bitvid": "900", "bitrate": "1500"}) == "1500"

    def test_secondary_alias(self):
        """Later aliases are honored when earlier ones are absent."""
        param = ProfileParameter("bitrate", ("bitrate", "bitvid"), "1200")
        assert param.lookup({"bitvid": "900"}) == "900"

    def test_bare_flag_rejected(self):
        """A parameter passed without a value is a validation error."""
        param = ProfileParameter("q", ("q",), "20")
        with pytest.raises(ValidationError) as exc_info:
            param.lookup({"q": True})
        assert exc_info.value.field == "q"

    def test_empty_value_rejected(self):
        """A parameter passed with an empty value is a validation error."""
        param = ProfileParameter("abitrate", ("abitrate", "bitaud"), "100k")
        with pytest.raises(ValidationError) as exc_info:
            param.lookup({"bitaud": ""})
        assert exc_info.value.field == "bitaud"


class TestTemplates:
    """Tests for fixed and parametrized profile rendering."""

    def test_fixed_ignores_extra_args(self):
        """Fixed profiles render verbatim."""
        profile = FixedProfile("--cqp 20", "h265")
        assert profile.render({"q": "30"}) == "--cqp 20"

    def test_parametrized_substitutes(self):
        """Placeholders are replaced by parameter values."""
        profile = ParametrizedProfile(
            "--cqp {q} --preset {preset}",
            (
                ProfileParameter("q", ("q",), "20"),
                ProfileParameter("preset", ("preset",), "quality"),
            ),
            "h265",
        )
        assert profile.render({"q": "24"}) == "--cqp 24 --preset quality"


class TestProfileResolver:
    """Tests for ProfileResolver."""

    def test_builtin_default_video(self, profile_table):
        """The default video profile is the fixed VBR HEVC string."""
        resolver = ProfileResolver(profile_table)
        assert resolver.resolve_video("default", {}) == (
            "--vbrhq 1200 --codec h265 --preset quality --level auto --output-depth 10"
        )

    def test_cqp_quality_argument(self, profile_table):
        """--q fills the cqp profile."""
        resolver = ProfileResolver(profile_table)
        assert resolver.resolve_video("cqp", {"q": "22"}).startswith("--cqp 22 ")

    def test_2pass_bitvid_alias(self, profile_table):
        """--bitvid is an alias of the 2pass bitrate."""
        resolver = ProfileResolver(profile_table)
        assert resolver.resolve_video("2pass", {"bitvid": "3000"}).startswith(
            "--vbrhq 3000 "
        )

    def test_audio_bitrate_argument(self, profile_table):
        """--abitrate fills the opus profiles."""
        resolver = ProfileResolver(profile_table)
        options = resolver.resolve_audio("opus-stereo", {"abitrate": "96k"})
        assert options == "-c:a libopus -b:a 96k -ac 2"

    def test_video_copy_short_circuits(self):
        """The copy key resolves to the marker even without a table entry."""
        resolver = ProfileResolver(ProfileTable())
        assert resolver.resolve_video(COPY_MARKER, {}) == COPY_MARKER

    def test_audio_copy(self, profile_table):
        """Audio copy is an ordinary profile with the mka extension."""
        resolver = ProfileResolver(profile_table)
        assert resolver.resolve_audio("copy", {}) == "-c:a copy"
        assert resolver.audio_extension("copy") == "mka"

    def test_extensions(self, profile_table):
        """Bundled encodes write h265 and opus streams."""
        resolver = ProfileResolver(profile_table)
        assert resolver.video_extension("cqp") == "h265"
        assert resolver.audio_extension("opus-5.1") == "opus"

    def test_unknown_video_profile(self, profile_table):
        """Unknown video keys raise UnknownProfileError."""
        resolver = ProfileResolver(profile_table)
        with pytest.raises(UnknownProfileError) as exc_info:
            resolver.resolve_video("ultra", {})
        assert str(exc_info.value) == "Unknown Video Profile 'ultra'"
        assert exc_info.value.kind == "video"
        assert exc_info.value.key == "ultra"

    def test_unknown_audio_profile(self, profile_table):
        """Unknown audio keys raise UnknownProfileError."""
        resolver = ProfileResolver(profile_table)
        with pytest.raises(UnknownProfileError, match="Unknown Audio Profile 'mp3'"):
            resolver.resolve_audio("mp3", {})

    @pytest.mark.parametrize("key", ["default", "2pass", "cqp"])
    def test_video_resolution_is_deterministic(self, profile_table, key):
        """The same key and arguments always resolve identically."""
        resolver = ProfileResolver(profile_table)
        args = {"q": "18", "bitrate": "2500"}
        assert resolver.resolve_video(key, args) == resolver.resolve_video(key, args)

    @pytest.mark.parametrize(
        "key", ["opus-8-6", "opus-5.1", "opus-pans", "opus-stereo", "copy", "default"]
    )
    def test_audio_resolution_is_deterministic(self, profile_table, key):
        """Audio resolution is a pure function of its inputs."""
        first = ProfileResolver(profile_table).resolve_audio(key, {"bitaud": "64k"})
        second = ProfileResolver(profile_table).resolve_audio(key, {"bitaud": "64k"})
        assert first == second


class TestProfileTable:
    """Tests for ProfileTable.merged."""

    def test_merged_overrides_and_adds(self, profile_table):
        """Merging replaces existing keys and adds new ones."""
        fast = FixedProfile("--cqp 30", "h265")
        merged = profile_table.merged(video={"default": fast, "fast": fast})

        assert merged.video["default"] is fast
        assert merged.video["fast"] is fast
        assert profile_table.video["default"] is not fast
        assert merged.audio == profile_table.audio
