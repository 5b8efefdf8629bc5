"""Profile completion tests."""

from __future__ import annotations

import pytest

from nutriplan.planner.profile_builder import complete_profile, nutrition_targets


def test_nutrition_targets_for_reference_profile(sample_profile):
    targets = nutrition_targets(sample_profile)

    assert targets.bmr == pytest.approx(1748.75)
    assert targets.activity_multiplier == pytest.approx(1.45)
    assert targets.tdee == 2536
    assert targets.target_calories == 2036
    assert targets.water_goal == pytest.approx(3.1)


def test_complete_profile_fills_derived_fields(sample_profile):
    assert sample_profile.target_calories is None

    completed = complete_profile(sample_profile)

    assert completed.tdee == 2536
    assert completed.target_calories == 2036
    assert completed.macros is not None
    assert completed.macros.protein == 178
    assert completed.weight_kg == sample_profile.weight_kg


def test_complete_profile_recomputes_stale_targets(sample_profile):
    stale = sample_profile.model_copy(update={"target_calories": 9999, "tdee": 1})
    assert complete_profile(stale).target_calories == 2036
