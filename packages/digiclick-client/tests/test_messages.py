"""Tests for digiclick_client.messages and digiclick_client.validation."""

import pytest

from digiclick_client.messages import (
    DEFAULT_ERROR,
    DEFAULT_SUCCESS,
    get_error_message,
    get_success_message,
)
from digiclick_client.schemas.result import ApiFailure, ApiSuccess, JsonBody
from digiclick_client.validation import (
    validate_email,
    validate_message,
    validate_name,
    validate_password,
)


class TestGetErrorMessage:
    def test_string_passes_through(self):
        assert get_error_message("Bad input") == "Bad input"

    def test_mapping_message(self):
        assert get_error_message({"message": "Token expired"}) == "Token expired"

    def test_list_of_validation_errors(self):
        errors = [{"msg": "Email invalid"}, {"message": "Name too short"}, "Phone missing"]
        assert get_error_message(errors) == "Email invalid, Name too short, Phone missing"

    def test_exception_uses_str(self):
        assert get_error_message(RuntimeError("boom")) == "boom"

    @pytest.mark.parametrize("value", [None, 42, {}])
    def test_unknown_shapes_fall_back(self, value):
        assert get_error_message(value) == DEFAULT_ERROR


class TestGetSuccessMessage:
    def test_prefers_data_message(self):
        result = ApiSuccess(body=JsonBody(value={"message": "Subscribed!"}), status=201)
        assert get_success_message(result) == "Subscribed!"

    def test_top_level_message(self):
        assert get_success_message({"message": "Saved"}) == "Saved"

    def test_fallback(self):
        assert get_success_message(ApiFailure(error="x", status=0)) == DEFAULT_SUCCESS


class TestValidators:
    @pytest.mark.parametrize("email", ["a@b.co", "first.last@sub.example.com"])
    def test_valid_emails(self, email):
        assert validate_email(email) is True

    @pytest.mark.parametrize("email", ["", None, "no-at.example.com", "a@b", "a b@c.com"])
    def test_invalid_emails(self, email):
        assert validate_email(email) is False

    def test_password_minimum_length(self):
        assert validate_password("123456") is True
        assert validate_password("12345") is False
        assert validate_password(None) is False

    def test_name_is_trimmed(self):
        assert validate_name(" A ") is False
        assert validate_name("Al") is True

    def test_message_is_trimmed(self):
        assert validate_message("   short   ") is False
        assert validate_message("long enough message") is True
