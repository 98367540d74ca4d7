"""
Formula-focused unit tests for the core engine.

Each test verifies a specific rule: weight calculation and rounding,
Epley estimation, training-max helpers, the fixed week tables and the
analytics derived from completed sets.

Values are hand-computed from the formulas so the tests pin exact behaviour.
"""

import pytest

from lift531.core.config import (
    AMRAP_SET_INDEX,
    AMRAP_WEEK,
    DEFAULT_WARMUP,
    TM_INCREMENTS,
    WEEK_PERCENTAGES,
    WEEK_REPS,
)
from lift531.core.metrics import (
    best_estimated_1rm,
    calculate_weight,
    estimate_1rm,
    estimated_1rm_trend,
    initial_training_maxes,
    personal_records,
    reset_training_max,
    round_half_up,
    scale_training_maxes,
    session_volume,
    strength_level,
    training_max_from_reps,
    volume_by_week,
)
from lift531.core.models import (
    Exercise,
    InvalidDomainValue,
    SetData,
    TrainingProfile,
    WorkoutSession,
    validate_lift,
    validate_week,
)
from lift531.core.plates import calculate_plates, loaded_weight

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _done(reps: int, weight: float, actual: int | None = None, **kw) -> SetData:
    return SetData(reps=reps, weight=weight, completed=True, actual_reps=actual, **kw)


def _session(
    sets: list[SetData],
    *,
    lift: str = "Squat",
    cycle: int = 1,
    week: int = 1,
    date: str = "2026-03-02",
    sid: str = "s1",
    extra: list[Exercise] | None = None,
) -> WorkoutSession:
    return WorkoutSession(
        id=sid,
        date=date,
        title=f"C{cycle} W{week} - {lift}",
        cycle=cycle,
        week=week,
        lift=lift,
        exercises=[Exercise(name=lift, type="Main", sets=sets), *(extra or [])],
        completed=True,
    )


# =============================================================================
# Rounding and weight calculation
# =============================================================================

class TestCalculateWeight:
    def test_round_half_up_goes_up_on_exact_half(self):
        assert round_half_up(10.5) == 11
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2

    def test_week1_percentages_on_300(self):
        """65/75/85% of 300 at 5 lb rounding: 195/225/255."""
        assert calculate_weight(300, 0.65, 5) == 195
        assert calculate_weight(300, 0.75, 5) == 225
        assert calculate_weight(300, 0.85, 5) == 255

    def test_rounds_to_nearest_increment(self):
        """215 * 0.65 = 139.75 -> 27.95 steps -> 28 * 5 = 140."""
        assert calculate_weight(215, 0.65, 5) == 140

    def test_exact_half_step_rounds_up(self):
        """105 * 0.5 = 52.5 -> 10.5 steps -> 11 * 5 = 55 (not banker's 50)."""
        assert calculate_weight(105, 0.5, 5) == 55

    def test_kg_rounding_increment(self):
        assert calculate_weight(100, 0.85, 2.5) == 85
        assert calculate_weight(101, 0.65, 2.5) == 65  # 65.65 -> 26.26 steps -> 26

    def test_zero_training_max_yields_zero(self):
        assert calculate_weight(0, 0.65, 5) == 0

    def test_zero_percentage_yields_zero(self):
        assert calculate_weight(300, 0, 5) == 0

    def test_result_is_float(self):
        assert isinstance(calculate_weight(300, 0.65, 5), float)

    @pytest.mark.parametrize("increment", [5, 2.5, 1.25])
    @pytest.mark.parametrize("percent", [0.0, 0.4, 0.5, 0.65, 0.75, 0.85, 0.9, 0.95, 1.0])
    @pytest.mark.parametrize("training_max", [0, 1, 45, 101, 137.5, 215, 283.3, 405, 612])
    def test_always_a_multiple_of_increment(self, training_max, percent, increment):
        weight = calculate_weight(training_max, percent, increment)
        assert (weight / increment).is_integer()
        assert abs(weight - training_max * percent) <= increment / 2 + 1e-9


# =============================================================================
# Epley and training-max helpers
# =============================================================================

class TestEpley:
    def test_225_for_5(self):
        """225 * (1 + 5/30) = 262.5 -> 263."""
        assert estimate_1rm(225, 5) == 263

    def test_single_rep(self):
        """100 * (1 + 1/30) = 103.33 -> 103."""
        assert estimate_1rm(100, 1) == 103

    def test_zero_reps_is_the_weight(self):
        assert estimate_1rm(200, 0) == 200

    def test_best_estimate_uses_completed_sets_only(self):
        ex = Exercise(
            name="Squat",
            type="Main",
            sets=[
                _done(5, 225),                                   # 263
                SetData(reps=5, weight=300, completed=False),    # ignored
            ],
        )
        assert best_estimated_1rm(ex) == 263

    def test_best_estimate_uses_actual_reps(self):
        """AMRAP 285 x 8: 285 * (1 + 8/30) = 361."""
        ex = Exercise(name="Squat", type="Main", sets=[_done(1, 285, actual=8, is_amrap=True)])
        assert best_estimated_1rm(ex) == 361

    def test_no_completed_sets_is_zero(self):
        ex = Exercise(name="Squat", type="Main", sets=[SetData(reps=5, weight=225)])
        assert best_estimated_1rm(ex) == 0


class TestTrainingMaxHelpers:
    def test_initial_tm_is_90_percent_rounded(self):
        """315 * 0.9 = 283.5 -> 284; 225 * 0.9 = 202.5 -> 203."""
        tms = initial_training_maxes({"Squat": 315, "Bench Press": 225})
        assert tms["Squat"] == 284
        assert tms["Bench Press"] == 203

    def test_initial_tm_missing_lift_is_zero(self):
        tms = initial_training_maxes({"Squat": 315})
        assert tms["Deadlift"] == 0
        assert set(tms) == {"Squat", "Bench Press", "Deadlift", "Overhead Press"}

    def test_tm_from_rep_max(self):
        """205 x 5 -> Epley 239 -> 239 * 0.9 = 215.1 -> 215."""
        assert training_max_from_reps(205, 5, 5) == 215

    def test_reset_is_minus_ten_percent(self):
        assert reset_training_max(300) == 270

    def test_scale_all_maxes(self):
        scaled = scale_training_maxes({"Squat": 300, "Bench Press": 200}, 90)
        assert scaled == {"Squat": 270, "Bench Press": 180}


# =============================================================================
# Fixed tables
# =============================================================================

class TestScheduleTables:
    def test_week_percentages(self):
        assert WEEK_PERCENTAGES[1] == (0.65, 0.75, 0.85)
        assert WEEK_PERCENTAGES[2] == (0.70, 0.80, 0.90)
        assert WEEK_PERCENTAGES[3] == (0.75, 0.85, 0.95)
        assert WEEK_PERCENTAGES[4] == (0.40, 0.50, 0.60)

    def test_week_reps(self):
        assert WEEK_REPS[1] == (5, 5, 5)
        assert WEEK_REPS[2] == (3, 3, 3)
        assert WEEK_REPS[3] == (5, 3, 1)
        assert WEEK_REPS[4] == (5, 5, 5)

    def test_amrap_only_on_week3_last_set(self):
        assert AMRAP_WEEK == 3
        assert AMRAP_SET_INDEX == 2

    def test_default_warmup(self):
        assert DEFAULT_WARMUP == ((0.40, 5), (0.50, 5), (0.60, 3))

    def test_increments(self):
        assert TM_INCREMENTS["lbs"] == (5.0, 10.0)
        assert TM_INCREMENTS["kg"] == (2.5, 5.0)


class TestDomainValidation:
    def test_unknown_lift_rejected(self):
        with pytest.raises(InvalidDomainValue):
            validate_lift("Curl")

    @pytest.mark.parametrize("week", [0, 5, -1])
    def test_week_out_of_range_rejected(self, week):
        with pytest.raises(InvalidDomainValue):
            validate_week(week)

    def test_profile_rejects_unknown_program(self):
        with pytest.raises(InvalidDomainValue):
            TrainingProfile(selected_program="Madcow")  # type: ignore[arg-type]

    def test_profile_rejects_unknown_lift_key(self):
        with pytest.raises(InvalidDomainValue):
            TrainingProfile(training_maxes={"Curl": 50})

    def test_invalid_domain_value_is_value_error(self):
        assert issubclass(InvalidDomainValue, ValueError)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            SetData(reps=5, weight=-5)

    def test_performed_reps_prefers_actual(self):
        assert SetData(reps=1, weight=100, actual_reps=7).performed_reps == 7
        assert SetData(reps=1, weight=100, actual_reps=0).performed_reps == 0
        assert SetData(reps=3, weight=100).performed_reps == 3


# =============================================================================
# Analytics
# =============================================================================

class TestVolume:
    def test_session_volume_counts_completed_sets(self):
        s = _session(
            [_done(5, 200), _done(5, 200, actual=3), SetData(reps=5, weight=200)],
            extra=[Exercise(name="Leg Press", type="Assistance", sets=[_done(10, 100)])],
        )
        # 200*5 + 200*3 + 100*10
        assert session_volume(s) == 2600

    def test_volume_grouped_by_cycle_week(self):
        history = [
            _session([_done(5, 100)], week=1, sid="a"),
            _session([_done(5, 100)], week=1, sid="b", lift="Deadlift"),
            _session([_done(3, 100)], week=2, sid="c"),
        ]
        assert volume_by_week(history) == {"C1W1": 1000, "C1W2": 300}


class TestRecordsAndTrend:
    def test_personal_records_by_bracket(self):
        s = _session(
            [_done(5, 225), _done(3, 255), _done(1, 285, actual=8, is_amrap=True)],
            week=3,
            date="2026-03-16",
        )
        records = personal_records([s], "Squat")
        assert records[1].weight == 285
        assert records[3].weight == 285
        assert records[5].weight == 285
        assert records[10].weight == 0
        assert records[10].date == "-"
        assert records[5].date == "2026-03-16"

    def test_personal_records_ignore_other_lifts(self):
        s = _session([_done(5, 315)], lift="Deadlift")
        assert personal_records([s], "Squat")[1].weight == 0

    def test_trend_one_point_per_session(self):
        history = [
            _session([_done(5, 225)], sid="a", date="2026-03-02"),
            _session([_done(5, 235)], sid="b", date="2026-03-09"),
            _session([_done(5, 135)], sid="c", lift="Bench Press"),
        ]
        points = estimated_1rm_trend(history, "Squat")
        assert [p.session_id for p in points] == ["a", "b"]
        assert points[0].estimated_1rm == 263


class TestStrengthLevel:
    def test_intermediate_squat(self):
        """300 / 200 = 1.5x bodyweight: Intermediate, next target 2.0x = 400."""
        level = strength_level("Squat", 300, 200)
        assert level.level == "Intermediate"
        assert level.ratio == 1.5
        assert level.next_target == 400
        assert level.progress == 0.0

    def test_below_first_standard(self):
        level = strength_level("Bench Press", 50, 200)
        assert level.level == "Untrained"

    def test_missing_bodyweight_is_unknown(self):
        assert strength_level("Deadlift", 400, 0).level == "Unknown"


# =============================================================================
# Plates
# =============================================================================

class TestPlates:
    def test_two_plates_per_side(self):
        assert calculate_plates(225, "lbs") == [45, 45]

    def test_mixed_plates(self):
        assert calculate_plates(185, "lbs") == [45, 25]

    def test_kg_with_change_plates(self):
        assert calculate_plates(102.5, "kg") == [25, 15, 1.25]

    def test_below_bar_is_empty(self):
        assert calculate_plates(40, "lbs") == []

    def test_unloadable_remainder_falls_short(self):
        plates = calculate_plates(227, "lbs")
        assert plates == [45, 45]
        assert loaded_weight(plates, 45) == 225

    def test_inventory_limits_pairs(self):
        """One pair of 45s and two pairs of 25s: 275 lbs cannot be reached."""
        plates = calculate_plates(275, "lbs", inventory={45: 2, 25: 4})
        assert plates == [45, 25, 25]

    def test_custom_bar(self):
        assert calculate_plates(135, "lbs", bar_weight=35) == [45, 5]

    def test_invalid_unit(self):
        with pytest.raises(InvalidDomainValue):
            calculate_plates(100, "stone")
