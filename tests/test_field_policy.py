"""
Unit tests for field policy declaration and startup checks.
"""

from typing import Optional

import pytest
from pydantic import BaseModel, Field

from entities.user import User, UserUpdate
from policies.field_policy import (
    FieldPolicy,
    FieldPolicyConfigurationError,
    FieldSpec,
    FieldType,
    UnknownFieldError,
)
from policies.users import USER_UPDATE_POLICY, build_user_update_policy


class Profile(BaseModel):
    id: str
    nickname: Optional[str] = None
    score: float = 0.0
    verified: bool = False
    api_token: str = Field("", json_schema_extra={"protected": True})


class TestUserUpdatePolicy:
    """Tests for the declared user policy."""

    def test_fields(self):
        assert USER_UPDATE_POLICY.fields() == frozenset({"firstName", "lastName", "birthYear"})

    def test_type_of(self):
        assert USER_UPDATE_POLICY.type_of("birthYear") == FieldSpec(type=FieldType.INTEGER)
        assert USER_UPDATE_POLICY.type_of("firstName").type is FieldType.STRING

    def test_type_of_unknown_field_raises(self):
        with pytest.raises(UnknownFieldError):
            USER_UPDATE_POLICY.type_of("password")

    def test_protected_fields(self):
        assert USER_UPDATE_POLICY.protected_fields() == frozenset({"id", "password"})

    def test_contains(self):
        assert "lastName" in USER_UPDATE_POLICY
        assert "password" not in USER_UPDATE_POLICY

    def test_derived_policy_matches_declared_policy(self):
        derived = build_user_update_policy()
        assert derived.fields() == USER_UPDATE_POLICY.fields()
        for name in derived.fields():
            assert derived.type_of(name) == USER_UPDATE_POLICY.type_of(name)


class TestPolicyConfigurationErrors:
    """Misconfigured policies must fail at construction."""

    def test_unknown_field(self):
        with pytest.raises(FieldPolicyConfigurationError, match="nickname"):
            FieldPolicy(User, {"firstName": FieldType.STRING, "nickname": FieldType.STRING})

    def test_protected_field(self):
        with pytest.raises(FieldPolicyConfigurationError, match="password"):
            FieldPolicy(User, {"password": FieldType.STRING})

    def test_identifier_is_protected(self):
        with pytest.raises(FieldPolicyConfigurationError, match="id"):
            FieldPolicy(User, {"id": FieldType.STRING})

    def test_attribute_name_is_not_a_field_name(self):
        """Policies use wire names; the python attribute name is unknown."""
        with pytest.raises(FieldPolicyConfigurationError):
            FieldPolicy(User, {"first_name": FieldType.STRING})

    def test_type_disagrees_with_record(self):
        with pytest.raises(FieldPolicyConfigurationError, match="birthYear"):
            FieldPolicy(User, {"birthYear": FieldType.STRING})

    def test_nullable_on_required_field(self):
        with pytest.raises(FieldPolicyConfigurationError, match="nullable"):
            FieldPolicy(User, {"lastName": FieldSpec(type=FieldType.STRING, nullable=True)})

    def test_protected_marker_on_other_models(self):
        with pytest.raises(FieldPolicyConfigurationError, match="api_token"):
            FieldPolicy(Profile, {"api_token": FieldType.STRING})

    def test_underivable_dto_type(self):
        class BadUpdate(BaseModel):
            tags: Optional[list] = None

        with pytest.raises(FieldPolicyConfigurationError, match="tags"):
            FieldPolicy.from_update_model(Profile, BadUpdate)

    def test_dto_with_protected_field(self):
        class LeakyUpdate(UserUpdate):
            password: Optional[str] = None

        with pytest.raises(FieldPolicyConfigurationError, match="password"):
            FieldPolicy.from_update_model(User, LeakyUpdate)


class TestOtherRecordTypes:
    """Policies work for any pydantic record."""

    def test_nullable_and_number_fields(self):
        policy = FieldPolicy(Profile, {
            "nickname": FieldSpec(type=FieldType.STRING, nullable=True),
            "score": FieldType.NUMBER,
            "verified": FieldType.BOOLEAN,
        })
        assert policy.type_of("nickname").accepts(None)
        assert policy.type_of("score").accepts(3)
        assert policy.type_of("score").accepts(2.5)
        assert not policy.type_of("score").accepts(True)
        assert policy.type_of("verified").accepts(False)
        assert not policy.type_of("verified").accepts(0)

    def test_derived_nullability_follows_record(self):
        class ProfileUpdate(BaseModel):
            nickname: Optional[str] = None
            score: Optional[float] = None

        policy = FieldPolicy.from_update_model(Profile, ProfileUpdate)
        assert policy.type_of("nickname").nullable is True
        assert policy.type_of("score").nullable is False

    def test_pep604_optional_is_nullable(self):
        class Badge(BaseModel):
            id: str
            title: str | None = None

        class BadgeUpdate(BaseModel):
            title: str | None = None

        policy = FieldPolicy.from_update_model(Badge, BadgeUpdate)
        assert policy.type_of("title") == FieldSpec(type=FieldType.STRING, nullable=True)


class Gauge(BaseModel):
    id: str
    level: int = Field(0, ge=0, le=10)
    unit: Optional[str] = Field(None, max_length=3)


class TestRecordConstraints:
    """Record field constraints are part of the policy's value check."""

    @pytest.fixture
    def policy(self):
        return FieldPolicy(Gauge, {
            "level": FieldType.INTEGER,
            "unit": FieldSpec(type=FieldType.STRING, nullable=True),
        })

    def test_value_within_constraints(self, policy):
        assert policy.constraint_error("level", 10) is None
        assert policy.constraint_error("unit", "kPa") is None
        assert policy.constraint_error("unit", None) is None

    def test_value_outside_constraints(self, policy):
        assert "greater than or equal to 0" in policy.constraint_error("level", -1)
        assert "at most 3" in policy.constraint_error("unit", "bars")

    def test_unknown_field(self, policy):
        with pytest.raises(UnknownFieldError):
            policy.constraint_error("id", "g2")
