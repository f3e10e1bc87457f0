"""
Unit tests for merging validated values onto a record.
"""

from entities.user import User
from services.merge_engine import MergeEngine, apply


class TestMerge:
    """Direct overwrite semantics."""

    def test_overwrites_supplied_fields_only(self, user):
        merged = apply(user, {"firstName": "Jane"})
        assert merged.first_name == "Jane"
        assert merged.last_name == user.last_name
        assert merged.birth_year == user.birth_year
        assert merged.password == user.password
        assert merged.id == user.id

    def test_falsy_value_overwrites(self, user):
        merged = apply(user, {"birthYear": 0, "lastName": ""})
        assert merged.birth_year == 0
        assert merged.last_name == ""

    def test_empty_mapping_returns_equal_copy(self, user):
        merged = apply(user, {})
        assert merged == user
        assert merged is not user

    def test_existing_record_is_not_mutated(self, user):
        before = user.model_dump()
        apply(user, {"firstName": "Jane", "birthYear": 2000})
        assert user.model_dump() == before

    def test_result_type(self, user):
        assert isinstance(apply(user, {"lastName": "Roe"}), User)

    def test_deterministic(self, user):
        first = apply(user, {"firstName": "Jane"})
        second = apply(first, {"firstName": "Jane"})
        assert first == second

    def test_engine_wrapper(self, user):
        assert MergeEngine().apply(user, {"lastName": "Roe"}).last_name == "Roe"
