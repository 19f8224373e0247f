"""Tests for video modifiers and request validation."""

import logging

import pytest

from batch_encoder.exceptions import UnknownProfileError, ValidationError
from batch_encoder.models import JobRequest, VppMode
from batch_encoder.policy.modifiers import (
    build_video_modifiers,
    parse_resize,
    validate_crop,
    validate_request,
)
from batch_encoder.profiles import ProfileResolver


class TestParseResize:
    """Tests for parse_resize function."""

    def test_empty_is_none(self):
        assert parse_resize("") is None

    def test_valid(self):
        assert parse_resize("1280x720") == (1280, 720)

    @pytest.mark.parametrize(
        "value", ["1280", "1280X720", "x720", "1280x720p", "a x b"]
    )
    def test_invalid(self, value):
        """Anything but digits-x-digits is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            parse_resize(value)
        assert exc_info.value.field == "resize"


class TestValidateCrop:
    """Tests for validate_crop function."""

    @pytest.mark.parametrize("value", ["", "0,140,0,140", "10,0,10,0"])
    def test_valid(self, value):
        validate_crop(value)

    @pytest.mark.parametrize("value", ["0,140,0", "0,-1,0,0", "a,b,c,d", "0;0;0;0"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError, match="L,T,R,B"):
            validate_crop(value)


class TestBuildVideoModifiers:
    """Tests for build_video_modifiers function."""

    @pytest.mark.parametrize(
        "vpp,expected",
        [
            (VppMode.NONE, []),
            (VppMode.EDGE, ["--vpp-edgelevel"]),
            (VppMode.DEBAND, ["--vpp-deband"]),
            (VppMode.BOTH, ["--vpp-edgelevel", "--vpp-deband"]),
        ],
    )
    def test_vpp_modes(self, vpp, expected):
        """Each VPP mode maps to its encoder filters."""
        request = JobRequest(target="a.mkv", vpp=vpp)
        assert build_video_modifiers(request) == expected

    def test_resize_and_crop(self):
        """Resize and crop follow the VPP filters."""
        request = JobRequest(
            target="a.mkv", vpp=VppMode.NONE, resize="1280x720", crop="0,140,0,140"
        )
        assert build_video_modifiers(request) == [
            "--output-res",
            "1280x720",
            "--crop",
            "0,140,0,140",
        ]

    def test_vpp_string_is_coerced(self):
        """VPP modes may be passed by name."""
        request = JobRequest(target="a.mkv", vpp="Deband")
        assert request.vpp == VppMode.DEBAND

    def test_invalid_vpp(self):
        with pytest.raises(ValidationError, match="Invalid vpp mode"):
            JobRequest(target="a.mkv", vpp="sharpen")


class TestValidateRequest:
    """Tests for validate_request function."""

    def test_valid_request_logs_profiles(self, profile_table, caplog):
        """A valid request logs the chosen profiles and modifiers."""
        request = JobRequest(target="a.mkv", video_profile="cqp", resize="1280x720")

        with caplog.at_level(logging.INFO):
            validate_request(request, ProfileResolver(profile_table))

        assert "Profile [Video]: cqp" in caplog.text
        assert "Profile [Audio]: default" in caplog.text
        assert "Modifier [Resize]: 1280x720" in caplog.text

    def test_bad_resize(self, profile_table):
        request = JobRequest(target="a.mkv", resize="big")
        with pytest.raises(ValidationError):
            validate_request(request, ProfileResolver(profile_table))

    def test_bad_crop(self, profile_table):
        request = JobRequest(target="a.mkv", crop="1,2")
        with pytest.raises(ValidationError):
            validate_request(request, ProfileResolver(profile_table))

    def test_unknown_profile(self, profile_table):
        request = JobRequest(target="a.mkv", audio_profile="mp3")
        with pytest.raises(UnknownProfileError):
            validate_request(request, ProfileResolver(profile_table))

    def test_bare_flag_parameter(self, profile_table):
        """A template parameter passed without a value fails validation."""
        request = JobRequest(
            target="a.mkv", video_profile="cqp", extra_args={"q": True}
        )
        with pytest.raises(ValidationError, match="--q"):
            validate_request(request, ProfileResolver(profile_table))

    def test_empty_parameter_value(self, profile_table):
        """An empty template value fails before any file is planned."""
        request = JobRequest(
            target="a.mkv", audio_profile="opus-stereo", extra_args={"abitrate": ""}
        )
        with pytest.raises(ValidationError, match="--abitrate"):
            validate_request(request, ProfileResolver(profile_table))

    def test_unused_bare_flag_is_ignored(self, profile_table):
        """Flags no profile reads do not fail validation."""
        request = JobRequest(target="a.mkv", extra_args={"verbose": True})
        validate_request(request, ProfileResolver(profile_table))

    def test_copy_mode_skips_modifier_logging(self, profile_table, caplog):
        """Copy mode reports that modifiers are not applied."""
        request = JobRequest(target="a.mkv", video_profile="copy")
        with caplog.at_level(logging.INFO):
            validate_request(request, ProfileResolver(profile_table))
        assert "Video copy mode" in caplog.text
        assert "Modifier [VPP]" not in caplog.text
