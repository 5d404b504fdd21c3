"""Tests for bucket name validation."""

from __future__ import annotations

import pytest

from s3gateway.services.errors import InvalidRequestError
from s3gateway.services.validation import bucket_name_violation, validate_bucket_name


@pytest.mark.parametrize(
    "name",
    [
        "abc",
        "my-bucket",
        "my.bucket.name",
        "bucket-2024",
        "1bucket",
        "a" * 63,
        "192.168.1",
        "256.1.1.1",
        "xn-bucket",
        "bucket-s3",
    ],
)
def test_accepts_valid_names(name):
    assert bucket_name_violation(name) is None
    assert validate_bucket_name(name) == name


@pytest.mark.parametrize(
    ("name", "fragment"),
    [
        ("ab", "between 3 and 63 characters"),
        ("a" * 64, "between 3 and 63 characters"),
        ("", "between 3 and 63 characters"),
        ("My-Bucket", "can only contain lowercase letters"),
        ("bucket_name", "can only contain lowercase letters"),
        ("bucket name", "can only contain lowercase letters"),
        ("-bucket", "must begin with a letter or number"),
        (".bucket", "must begin with a letter or number"),
        ("bucket-", "must end with a letter or number"),
        ("bucket.", "must end with a letter or number"),
        ("my..bucket", "two adjacent periods"),
        ("192.168.5.4", "formatted as an IP address"),
        ("0.0.0.0", "formatted as an IP address"),
        ("xn--bucket", "prefix 'xn--'"),
        ("bucket-s3alias", "suffix '-s3alias'"),
    ],
)
def test_rejects_each_rule_in_isolation(name, fragment):
    violation = bucket_name_violation(name)

    assert violation is not None
    assert fragment in violation


def test_reports_only_first_violation():
    # Too short and uppercase: the length rule is checked first.
    violation = bucket_name_violation("AB")

    assert violation is not None
    assert "between 3 and 63" in violation
    assert "lowercase" not in violation


def test_length_message_includes_actual_length():
    violation = bucket_name_violation("a" * 70)

    assert violation is not None
    assert "Got 70 characters" in violation


def test_validate_raises_invalid_request():
    with pytest.raises(InvalidRequestError, match="two adjacent periods"):
        validate_bucket_name("a..b")
