"""
Unit tests for the password policy rules.
"""

import dataclasses

from iamguard.core.findings import ResourceKind, Rule, Severity
from iamguard.core.snapshot import PasswordPolicy
from iamguard.rules import evaluate_password_policy


def test_missing_policy_yields_single_finding():
    findings = evaluate_password_policy(None)

    assert len(findings) == 1
    assert findings[0].rule == Rule.PASSWORD_POLICY_MISSING
    assert findings[0].severity == Severity.INFO
    assert findings[0].resource_kind == ResourceKind.PASSWORD_POLICY
    assert findings[0].message == "no password policy configured"


def test_strong_policy_passes(strong_password_policy):
    assert evaluate_password_policy(strong_password_policy) == []


def test_short_length_and_missing_symbols():
    policy = PasswordPolicy(
        minimum_password_length=6,
        require_symbols=False,
        require_numbers=True,
        require_lowercase_characters=True,
        require_uppercase_characters=True,
        max_password_age=120,
        password_reuse_prevention=2,
        hard_expiry=True,
        allow_users_to_change_password=True,
    )

    findings = evaluate_password_policy(policy)

    assert [f.message for f in findings] == ["minimum password length < 8", "require symbols"]
    assert [f.rule for f in findings] == [Rule.PASSWORD_MIN_LENGTH, Rule.PASSWORD_REQUIRE_SYMBOLS]


def test_every_check_fires_on_empty_policy():
    findings = evaluate_password_policy(PasswordPolicy())

    assert [f.rule for f in findings] == [
        Rule.PASSWORD_MIN_LENGTH,
        Rule.PASSWORD_REQUIRE_SYMBOLS,
        Rule.PASSWORD_REQUIRE_NUMBERS,
        Rule.PASSWORD_REQUIRE_LOWERCASE,
        Rule.PASSWORD_REQUIRE_UPPERCASE,
        Rule.PASSWORD_MAX_AGE,
        Rule.PASSWORD_REUSE_PREVENTION,
        Rule.PASSWORD_HARD_EXPIRY,
        Rule.PASSWORD_ALLOW_CHANGE,
    ]
    assert all(f.severity == Severity.WARNING for f in findings)


def test_checks_are_independent(strong_password_policy):
    toggles = {
        "require_numbers": Rule.PASSWORD_REQUIRE_NUMBERS,
        "require_lowercase_characters": Rule.PASSWORD_REQUIRE_LOWERCASE,
        "require_uppercase_characters": Rule.PASSWORD_REQUIRE_UPPERCASE,
        "hard_expiry": Rule.PASSWORD_HARD_EXPIRY,
        "allow_users_to_change_password": Rule.PASSWORD_ALLOW_CHANGE,
    }
    for field_name, rule in toggles.items():
        policy = dataclasses.replace(strong_password_policy, **{field_name: False})

        assert [f.rule for f in evaluate_password_policy(policy)] == [rule]


def test_max_age_and_reuse_thresholds(strong_password_policy):
    policy = dataclasses.replace(strong_password_policy, max_password_age=89, password_reuse_prevention=0)

    assert [f.rule for f in evaluate_password_policy(policy)] == [
        Rule.PASSWORD_MAX_AGE,
        Rule.PASSWORD_REUSE_PREVENTION,
    ]
