"""Tests for input and service error families."""

import pytest

from accessroute.exceptions import (
    AccessRouteError,
    ExternalServiceError,
    InputError,
    NoRouteAvailableError,
    ProfileError,
    ScoringError,
    ServiceError,
    SpeechError,
    ValidationError,
)


class TestInputErrors:
    def test_validation_error_code(self):
        assert ValidationError("bad").error_code == "VALIDATION_ERROR"

    def test_validation_error_field_and_value(self):
        error = ValidationError("bad polyline", field="polyline", value="??")
        assert error.context == {"field": "polyline", "value": "??"}

    def test_validation_error_without_field(self):
        assert ValidationError("bad").context == {}

    def test_profile_error_device(self):
        error = ProfileError("incomplete", device="walker")
        assert error.context["device"] == "walker"
        assert error.error_code == "PROFILE_ERROR"

    def test_input_errors_share_base(self):
        assert isinstance(ValidationError("x"), InputError)
        assert isinstance(ProfileError("x"), InputError)


class TestServiceErrors:
    def test_external_service_error_recoverable(self):
        error = ExternalServiceError("timeout", service_name="routing_provider")
        assert error.recoverable is True
        assert error.context["service_name"] == "routing_provider"

    def test_no_route_not_recoverable(self):
        error = NoRouteAvailableError("none")
        assert error.recoverable is False
        assert error.error_code == "NO_ROUTE_AVAILABLE"

    @pytest.mark.parametrize(
        ("error_class", "code"),
        [
            (ScoringError, "SCORING_ERROR"),
            (SpeechError, "SPEECH_ERROR"),
        ],
    )
    def test_error_codes(self, error_class, code):
        assert error_class("x").error_code == code
        assert AccessRouteError.get_by_error_code(code) is error_class

    def test_service_errors_share_base(self):
        for error_class in (ExternalServiceError, NoRouteAvailableError, ScoringError, SpeechError):
            assert issubclass(error_class, ServiceError)

    def test_catchable_as_base(self):
        with pytest.raises(AccessRouteError):
            raise NoRouteAvailableError("none")
