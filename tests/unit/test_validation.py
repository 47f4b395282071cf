"""
Unit tests for User validation rules.
"""

import pytest

from user_api.exceptions import UserValidationError
from user_api.models import User
from user_api.validation import ensure_valid, parse_user, validate_user


class TestRequiredFields:
    def test_valid_minimal_payload(self, minimal_user_payload):
        assert validate_user(minimal_user_payload) == {}

    def test_valid_full_payload(self, full_user_payload):
        assert validate_user(full_user_payload) == {}

    def test_missing_email_is_reported(self, minimal_user_payload):
        del minimal_user_payload["email"]
        report = validate_user(minimal_user_payload)
        assert list(report) == ["email"]

    def test_empty_name_is_reported(self, minimal_user_payload):
        minimal_user_payload["name"] = ""
        assert "name" in validate_user(minimal_user_payload)

    def test_company_requires_name(self, minimal_user_payload):
        minimal_user_payload["company"] = {"catchPhrase": "Synergy"}
        assert "company.name" in validate_user(minimal_user_payload)

    def test_geo_requires_both_coordinates(self, full_user_payload):
        del full_user_payload["address"]["geo"]["lng"]
        assert "address.geo.lng" in validate_user(full_user_payload)

    def test_non_object_payload(self):
        assert "user" in validate_user(["not", "a", "user"])


class TestLengthRules:
    def test_username_of_two_characters_fails(self, minimal_user_payload):
        minimal_user_payload["username"] = "jd"
        report = validate_user(minimal_user_payload)
        assert "username" in report
        assert "at least 3" in report["username"][0]

    def test_username_of_twenty_six_characters_fails(self, minimal_user_payload):
        minimal_user_payload["username"] = "u" * 26
        assert "username" in validate_user(minimal_user_payload)

    @pytest.mark.parametrize("length", [3, 255])
    def test_name_length_bounds_are_inclusive(self, minimal_user_payload, length):
        minimal_user_payload["name"] = "n" * length
        assert validate_user(minimal_user_payload) == {}

    def test_name_over_255_fails(self, minimal_user_payload):
        minimal_user_payload["name"] = "n" * 256
        assert "name" in validate_user(minimal_user_payload)

    def test_short_company_name_fails(self, full_user_payload):
        full_user_payload["company"]["name"] = "AB"
        assert "company.name" in validate_user(full_user_payload)


class TestFormatRules:
    def test_malformed_email_fails(self, minimal_user_payload):
        minimal_user_payload["email"] = "johndoe.example.com"
        assert "email" in validate_user(minimal_user_payload)

    def test_non_numeric_latitude_fails(self, full_user_payload):
        full_user_payload["address"]["geo"]["lat"] = "abc"
        report = validate_user(full_user_payload)
        assert list(report) == ["address.geo.lat"]

    @pytest.mark.parametrize("value", ["0", "-37.3159", "81.1496", "12"])
    def test_decimal_coordinates_pass(self, full_user_payload, value):
        full_user_payload["address"]["geo"]["lat"] = value
        assert validate_user(full_user_payload) == {}

    @pytest.mark.parametrize("value", ["1.", ".5", "+1.0", "1,5", " 1"])
    def test_malformed_coordinates_fail(self, full_user_payload, value):
        full_user_payload["address"]["geo"]["lng"] = value
        assert "address.geo.lng" in validate_user(full_user_payload)

    @pytest.mark.parametrize("website", ["hildegard.org", "not a url", "mailto:someone@example.com"])
    def test_invalid_website_fails(self, minimal_user_payload, website):
        minimal_user_payload["website"] = website
        assert "website" in validate_user(minimal_user_payload)

    @pytest.mark.parametrize("website", ["http://anastasia.net", "ftp://files.example.org/pub"])
    def test_valid_website_passes(self, minimal_user_payload, website):
        minimal_user_payload["website"] = website
        assert validate_user(minimal_user_payload) == {}

    def test_malformed_id_fails(self, minimal_user_payload):
        minimal_user_payload["id"] = "123"
        assert "id" in validate_user(minimal_user_payload)


class TestAggregateReport:
    def test_every_failing_field_is_reported(self, full_user_payload):
        del full_user_payload["email"]
        full_user_payload["username"] = "ab"
        full_user_payload["address"]["geo"]["lat"] = "north"
        full_user_payload["website"] = "nowhere"

        report = validate_user(full_user_payload)

        assert set(report) == {"email", "username", "address.geo.lat", "website"}


class TestParseAndEnsure:
    def test_parse_user_returns_model(self, full_user_payload):
        user = parse_user(full_user_payload)
        assert isinstance(user, User)
        assert user.company.catch_phrase == "Multi-layered client-server neural-net"

    def test_parse_user_raises_with_report(self, minimal_user_payload):
        del minimal_user_payload["email"]
        with pytest.raises(UserValidationError) as exc_info:
            parse_user(minimal_user_payload)
        assert "email" in exc_info.value.errors

    def test_ensure_valid_accepts_valid_user(self, minimal_user_payload):
        ensure_valid(User(**minimal_user_payload))

    def test_ensure_valid_catches_unvalidated_construction(self):
        user = User.model_construct(name="Jo", username="johndoe", email="johndoe@example.com")
        with pytest.raises(UserValidationError) as exc_info:
            ensure_valid(user)
        assert list(exc_info.value.errors) == ["name"]
