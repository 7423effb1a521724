import pytest

from src.domain.entities import Industry, SubscriptionPlan
from src.domain.validation import (
    normalize_email,
    slugify,
    validate_industry,
    validate_name,
    validate_password,
    validate_role,
    validate_subscription_plan,
    validate_subscription_status,
)


def test_email_is_trimmed_and_lower_cased():
    assert normalize_email("  Alice@Example.COM ").value == "alice@example.com"


@pytest.mark.parametrize(
    "email",
    [
        "",
        "   ",
        None,
        "no-at-sign",
        "a@b",
        "a b@c.de",
        ".alice@example.com",
        "alice..smith@example.com",
        "alice@example..com",
        "alice@@example.com",
    ],
)
def test_invalid_emails(email):
    result = normalize_email(email)

    assert result.is_err()
    assert result.error.code == "VALIDATION_ERROR"


def test_password_minimum_length():
    assert validate_password("12345678").is_ok()
    assert validate_password("1234567").error.code == "VALIDATION_ERROR"
    assert validate_password(None).is_err()


def test_name_limits():
    assert validate_name("  Alice ", "First name").value == "Alice"
    assert validate_name("x" * 51, "First name").is_err()
    assert "Last name" in validate_name("", "Last name").error.message


def test_industry_defaults_to_other():
    assert validate_industry(None).value == Industry.other
    assert validate_industry("fitness").value == Industry.fitness
    assert validate_industry("mining").is_err()


def test_closed_vocabularies():
    assert validate_role("admin").is_ok()
    assert validate_role("owner").is_err()
    assert validate_subscription_plan("growth").value == SubscriptionPlan.growth
    assert validate_subscription_plan("platinum").is_err()
    assert validate_subscription_status("past_due").is_ok()
    assert validate_subscription_status("paused").is_err()


@pytest.mark.parametrize(
    "name, slug",
    [
        ("Acme Corp", "acme-corp"),
        ("  Acme -- Corp!! ", "acme-corp"),
        ("Bob's Organization", "bob-s-organization"),
        ("123 Fitness", "123-fitness"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug
