import pytest

from config.models import ExclusionPolicy, MatchConfig


class TestExclusionPolicy:
    def test_coerce_accepts_values_and_members(self):
        assert ExclusionPolicy.coerce("exclude_same_id") is ExclusionPolicy.EXCLUDE_SAME_ID
        assert ExclusionPolicy.coerce("NONE") is ExclusionPolicy.NONE
        assert ExclusionPolicy.coerce(ExclusionPolicy.NONE) is ExclusionPolicy.NONE

    def test_unknown_policy(self):
        with pytest.raises(ValueError, match="Unknown exclusion policy"):
            ExclusionPolicy.coerce("exclude_everything")


class TestMatchConfig:
    def test_default_policy_depends_on_mode(self):
        config = MatchConfig()
        assert config.policy_for(self_set=True) is ExclusionPolicy.EXCLUDE_SAME_INDEX
        assert config.policy_for(self_set=False) is ExclusionPolicy.NONE

    def test_explicit_policy_wins(self):
        config = MatchConfig(exclusion_policy="exclude_same_id")
        assert config.policy_for(self_set=True) is ExclusionPolicy.EXCLUDE_SAME_ID
        assert config.policy_for(self_set=False) is ExclusionPolicy.EXCLUDE_SAME_ID

    def test_non_positive_threads_use_all_cpus(self):
        assert MatchConfig(worker_threads=-1).worker_threads >= 1

    def test_min_similarity_range(self):
        with pytest.raises(ValueError):
            MatchConfig(min_similarity=1.5)


def test_coerce_rejects_none():
    with pytest.raises(ValueError, match="must not be None"):
        ExclusionPolicy.coerce(None)


def test_chunk_rows_must_be_positive():
    with pytest.raises(ValueError):
        MatchConfig(chunk_rows=0)
