"""
Tests for workout generation: main sets, supplemental work per program
variant, assistance selection and the profile overrides that feed them.
"""

import pytest

from lift531.core.generator import (
    build_conditioning_session,
    generate_workout,
    get_last_used_weight,
)
from lift531.core.models import (
    AssistanceSettings,
    ConditioningData,
    Exercise,
    InvalidDomainValue,
    SetData,
    TrainingProfile,
    WarmupSet,
    WorkoutSession,
)
from lift531.core.programs import PROGRAM_REGISTRY, get_program, requires_premium
from lift531.core.schedule import resolve_schedule
from lift531.core.summary import workout_summary

TMS = {"Squat": 300, "Bench Press": 200, "Deadlift": 400, "Overhead Press": 120}


def _profile(**kw) -> TrainingProfile:
    kw.setdefault("training_maxes", dict(TMS))
    return TrainingProfile(**kw)


def _work_sets(session: WorkoutSession) -> list[SetData]:
    main = session.main_exercise()
    assert main is not None
    return [s for s in main.sets if not s.is_warmup]


def _assistance_session(name: str, weight: float, completed: bool = True, sid: str = "h") -> WorkoutSession:
    return WorkoutSession(
        id=sid,
        date="2026-03-02",
        title="old",
        cycle=1,
        week=1,
        lift="Squat",
        exercises=[
            Exercise(
                name=name,
                type="Assistance",
                sets=[SetData(reps=10, weight=weight, completed=completed) for _ in range(3)],
            )
        ],
    )


# =============================================================================
# Main exercise
# =============================================================================

class TestMainSets:
    def test_week1_squat(self):
        session = generate_workout(_profile(), "Squat", [])
        main = session.main_exercise()
        assert [(s.weight, s.reps) for s in main.sets] == [
            (120, 5), (150, 5), (180, 3),      # warmups 40/50/60%
            (195, 5), (225, 5), (255, 5),      # 65/75/85%
        ]
        assert [s.is_warmup for s in main.sets] == [True, True, True, False, False, False]

    def test_main_exercise_comes_first_and_is_named_after_lift(self):
        session = generate_workout(_profile(), "Bench Press", [])
        assert session.exercises[0].type == "Main"
        assert session.exercises[0].name == "Bench Press"

    def test_week3_amrap_on_last_set_only(self):
        session = generate_workout(_profile(current_week=3), "Squat", [])
        work = _work_sets(session)
        assert [(s.weight, s.reps) for s in work] == [(225, 5), (255, 3), (285, 1)]
        assert [s.is_amrap for s in work] == [False, False, True]

    @pytest.mark.parametrize("week", [1, 2, 4])
    def test_no_amrap_outside_week3(self, week):
        session = generate_workout(_profile(current_week=week), "Squat", [])
        assert not any(s.is_amrap for ex in session.exercises for s in ex.sets)

    def test_deload_week(self):
        work = _work_sets(generate_workout(_profile(current_week=4), "Squat", []))
        assert [(s.weight, s.reps) for s in work] == [(120, 5), (150, 5), (180, 5)]

    def test_sets_prefilled_and_not_completed(self):
        session = generate_workout(_profile(), "Squat", [])
        for ex in session.exercises:
            assert not ex.completed
            for s in ex.sets:
                assert not s.completed
                assert s.actual_reps == s.reps
        assert not session.completed

    def test_session_metadata(self):
        profile = _profile(current_cycle=2, current_week=3, selected_program="BBB")
        session = generate_workout(profile, "Deadlift", [], date="2026-04-01", session_id="abc")
        assert session.id == "abc"
        assert session.date == "2026-04-01"
        assert session.cycle == 2
        assert session.week == 3
        assert session.title == "C2 W3 - Deadlift"
        assert session.program_type == "BBB"
        assert session.profile_id == "root"
        assert session.type == "Strength"

    def test_generated_ids_are_unique(self):
        a = generate_workout(_profile(), "Squat", [])
        b = generate_workout(_profile(), "Squat", [])
        assert a.id != b.id

    def test_missing_training_max_gives_zero_weights(self):
        profile = _profile(training_maxes={"Squat": 300})
        work = _work_sets(generate_workout(profile, "Bench Press", []))
        assert all(s.weight == 0 for s in work)

    def test_kg_profile_rounds_to_2_5(self):
        profile = _profile(unit="kg", rounding=2.5, training_maxes={"Squat": 101})
        work = _work_sets(generate_workout(profile, "Squat", []))
        # 65.65 -> 65, 75.75 -> 75, 85.85 -> 85
        assert [s.weight for s in work] == [65, 75, 85]

    def test_zero_rounding_falls_back_to_unit_default(self):
        profile = _profile(rounding=0)
        assert resolve_schedule(profile, "Squat").rounding == 5.0

    def test_kg_profile_without_rounding_uses_2_5(self):
        """105 kg TM: 68.25 -> 67.5, 78.75 -> 80, 89.25 -> 90."""
        profile = _profile(unit="kg", training_maxes={"Squat": 105})
        assert profile.rounding == 0
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.weight for s in work] == [67.5, 80, 90]

    def test_unknown_lift(self):
        with pytest.raises(InvalidDomainValue):
            generate_workout(_profile(), "Curl", [])

    def test_does_not_mutate_profile(self):
        profile = _profile(selected_program="BBB")
        before = (dict(profile.training_maxes), profile.current_week, set(profile.achievements))
        generate_workout(profile, "Squat", [])
        assert before == (dict(profile.training_maxes), profile.current_week, set(profile.achievements))


# =============================================================================
# Overrides
# =============================================================================

class TestOverrides:
    def test_custom_percentages_for_week(self):
        profile = _profile(custom_percentages={1: [0.70, 0.80, 0.90]})
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.weight for s in work] == [210, 240, 270]

    def test_custom_percentages_other_week_untouched(self):
        profile = _profile(current_week=2, custom_percentages={1: [0.70, 0.80, 0.90]})
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.weight for s in work] == [210, 240, 270]  # week 2 defaults 70/80/90
        profile = _profile(current_week=3, custom_percentages={1: [0.5, 0.5, 0.5]})
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.weight for s in work] == [225, 255, 285]

    def test_incomplete_override_is_ignored(self):
        profile = _profile(custom_percentages={1: [0.70, 0.80]})
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.weight for s in work] == [195, 225, 255]

    def test_string_week_keys_accepted(self):
        profile = _profile(custom_reps={"1": [8, 6, 4]})  # type: ignore[dict-item]
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.reps for s in work] == [8, 6, 4]

    def test_custom_reps(self):
        profile = _profile(current_week=3, custom_reps={3: [3, 3, 3]})
        work = _work_sets(generate_workout(profile, "Squat", []))
        assert [s.reps for s in work] == [3, 3, 3]
        assert work[2].is_amrap

    def test_custom_warmups(self):
        profile = _profile(warmup_settings=[WarmupSet(0.3, 8), WarmupSet(0.5, 5)])
        main = generate_workout(profile, "Squat", []).main_exercise()
        warmups = [s for s in main.sets if s.is_warmup]
        assert [(s.weight, s.reps) for s in warmups] == [(90, 8), (150, 5)]

    def test_assistance_settings(self):
        profile = _profile(assistance_settings=AssistanceSettings(sets=4, reps=12))
        session = generate_workout(profile, "Squat", [])
        for ex in session.exercises_of_type("Assistance"):
            assert len(ex.sets) == 4
            assert all(s.reps == 12 for s in ex.sets)

    def test_custom_assistance_replaces_default_for_that_lift(self):
        profile = _profile(custom_assistance={"Squat": ["Lunges", "Step-ups"]})
        squat = generate_workout(profile, "Squat", [])
        assert [ex.name for ex in squat.exercises_of_type("Assistance")] == ["Lunges", "Step-ups"]
        bench = generate_workout(profile, "Bench Press", [])
        assert [ex.name for ex in bench.exercises_of_type("Assistance")] == [
            "Dumbbell Row", "Tricep Pushdowns", "Face Pulls",
        ]

    def test_assistance_count_is_a_floor(self):
        """Five configured names on a 1-assistance program: all five appear."""
        names = ["A", "B", "C", "D", "E"]
        profile = _profile(selected_program="BBB", custom_assistance={"Squat": names})
        session = generate_workout(profile, "Squat", [])
        assert [ex.name for ex in session.exercises_of_type("Assistance")] == names

    def test_fewer_names_than_count(self):
        profile = _profile(
            selected_program="Monolith",
            is_premium=True,
            custom_assistance={"Squat": ["Leg Press"]},
        )
        session = generate_workout(profile, "Squat", [])
        assert [ex.name for ex in session.exercises_of_type("Assistance")] == ["Leg Press"]


# =============================================================================
# Assistance weights
# =============================================================================

class TestLastUsedWeight:
    def test_leg_press_remembered(self):
        history = [_assistance_session("Leg Press", 180)]
        session = generate_workout(_profile(), "Squat", history)
        leg_press = next(ex for ex in session.exercises if ex.name == "Leg Press")
        assert all(s.weight == 180 for s in leg_press.sets)

    def test_newest_session_wins(self):
        history = [
            _assistance_session("Leg Press", 160, sid="a"),
            _assistance_session("Leg Press", 180, sid="b"),
        ]
        assert get_last_used_weight(history, "Leg Press") == 180

    def test_uncompleted_sets_skipped(self):
        history = [
            _assistance_session("Leg Press", 180, sid="a"),
            _assistance_session("Leg Press", 250, completed=False, sid="b"),
        ]
        assert get_last_used_weight(history, "Leg Press") == 180

    def test_never_performed_is_zero(self):
        assert get_last_used_weight([_assistance_session("Leg Press", 180)], "Dips") == 0

    def test_bodyweight_entries_skipped(self):
        history = [
            _assistance_session("Dips", 25, sid="a"),
            _assistance_session("Dips", 0, sid="b"),
        ]
        assert get_last_used_weight(history, "Dips") == 25


# =============================================================================
# Program variants
# =============================================================================

class TestPrograms:
    def test_registry_has_all_variants(self):
        assert set(PROGRAM_REGISTRY) == {"Original", "BBB", "FSL", "Beginner", "BBS", "Monolith"}

    def test_premium_flags(self):
        premium = {pid for pid, p in PROGRAM_REGISTRY.items() if p.is_premium}
        assert premium == {"FSL", "BBS", "Monolith"}

    def test_original_has_no_supplemental(self):
        session = generate_workout(_profile(), "Squat", [])
        assert session.exercises_of_type("Supplemental") == []

    def test_bbb_5x10_at_50_percent(self):
        session = generate_workout(_profile(selected_program="BBB"), "Squat", [])
        (supp,) = session.exercises_of_type("Supplemental")
        assert supp.name == "Squat (BBB)"
        assert len(supp.sets) == 5
        assert all(s.reps == 10 and s.weight == 150 for s in supp.sets)

    def test_bbb_weight_same_every_week(self):
        session = generate_workout(_profile(selected_program="BBB", current_week=3), "Squat", [])
        (supp,) = session.exercises_of_type("Supplemental")
        assert supp.sets[0].weight == 150

    def test_fsl_uses_first_set_percentage(self):
        profile = _profile(selected_program="FSL", is_premium=True, current_week=3)
        (supp,) = generate_workout(profile, "Squat", []).exercises_of_type("Supplemental")
        assert supp.name == "Squat (FSL)"
        assert [(s.weight, s.reps) for s in supp.sets] == [(225, 5)] * 5

    def test_fsl_follows_custom_first_percentage(self):
        profile = _profile(
            selected_program="FSL", is_premium=True, custom_percentages={1: [0.60, 0.70, 0.80]},
        )
        (supp,) = generate_workout(profile, "Squat", []).exercises_of_type("Supplemental")
        assert supp.sets[0].weight == 180

    def test_bbs_10x5(self):
        profile = _profile(selected_program="BBS", is_premium=True)
        (supp,) = generate_workout(profile, "Bench Press", []).exercises_of_type("Supplemental")
        assert len(supp.sets) == 10
        assert supp.sets[0].reps == 5
        assert supp.sets[0].weight == 130  # 65% of 200

    def test_beginner_5x5_fsl(self):
        (supp,) = generate_workout(
            _profile(selected_program="Beginner"), "Squat", []
        ).exercises_of_type("Supplemental")
        assert len(supp.sets) == 5
        assert supp.sets[0].weight == 195

    def test_monolith_deadlift_gets_three_sets(self):
        profile = _profile(selected_program="Monolith", is_premium=True)
        (dl,) = generate_workout(profile, "Deadlift", []).exercises_of_type("Supplemental")
        (sq,) = generate_workout(profile, "Squat", []).exercises_of_type("Supplemental")
        assert len(dl.sets) == 3
        assert len(sq.sets) == 5
        assert dl.sets[0].weight == 260  # 65% of 400

    def test_supplemental_sits_between_main_and_assistance(self):
        session = generate_workout(_profile(selected_program="BBB"), "Squat", [])
        assert [ex.type for ex in session.exercises] == [
            "Main", "Supplemental", "Assistance", "Assistance", "Assistance",
        ]

    def test_unknown_program(self):
        with pytest.raises(InvalidDomainValue):
            get_program("Madcow")


class TestPremiumGate:
    def test_premium_program_without_entitlement(self):
        assert requires_premium(_profile(selected_program="FSL"))

    def test_premium_program_with_entitlement(self):
        assert not requires_premium(_profile(selected_program="FSL", is_premium=True))

    def test_free_program(self):
        assert not requires_premium(_profile(selected_program="BBB"))

    def test_generation_itself_never_gates(self):
        session = generate_workout(_profile(selected_program="Monolith"), "Squat", [])
        assert session.exercises_of_type("Supplemental")


# =============================================================================
# Conditioning
# =============================================================================

class TestConditioning:
    def test_conditioning_session(self):
        profile = _profile(current_cycle=2, current_week=3, selected_program="BBB")
        data = ConditioningData(activity="Hill Sprints", duration_seconds=900, intensity="Hard")
        session = build_conditioning_session(profile, data, date="2026-04-02")
        assert session.type == "Conditioning"
        assert session.lift == "Conditioning"
        assert session.exercises == []
        assert session.completed
        assert session.duration_seconds == 900
        assert session.title == "Hill Sprints"
        assert (session.cycle, session.week) == (2, 3)
        assert session.conditioning is data


# =============================================================================
# Shareable summary
# =============================================================================

class TestWorkoutSummary:
    def test_lists_completed_sets_only(self):
        profile = _profile(current_week=3)
        session = generate_workout(profile, "Squat", [], date="2026-03-16")
        main = session.main_exercise()
        for s in main.sets[3:]:
            s.completed = True
        main.sets[-1].actual_reps = 8
        main.sets[-1].rpe = 9
        session.duration_seconds = 45 * 60
        session.notes = "Felt fast"

        lines = workout_summary(session, "lbs").splitlines()
        assert lines[1] == "C1 W3 - Squat - 2026-03-16"
        assert lines[2] == "Duration: 45m"
        assert "- Squat" in lines
        assert "   Set 4: 225 lbs x 5" in lines
        assert "   Set 6: 285 lbs x 8 (AMRAP) @ RPE 9" in lines
        assert not any(line.startswith("   Set 1:") for line in lines)
        # assistance was never done
        assert not any(f"- {ex.name}" in lines for ex in session.exercises_of_type("Assistance"))
        assert lines[-1] == "Notes: Felt fast"

    def test_zero_reps_shown_as_zero(self):
        profile = _profile(current_week=3)
        session = generate_workout(profile, "Bench Press", [])
        amrap = session.main_exercise().sets[-1]
        amrap.completed = True
        amrap.actual_reps = 0
        assert "x 0 (AMRAP)" in workout_summary(session)

    def test_conditioning(self):
        data = ConditioningData(
            activity="Rowing", duration_seconds=1200, intensity="Easy",
            distance=5, distance_unit="km",
        )
        session = build_conditioning_session(_profile(), data, date="2026-03-03")
        text = workout_summary(session)
        assert "Activity: Rowing" in text
        assert "Intensity: Easy" in text
        assert "Distance: 5 km" in text
        assert "Duration: 20m" in text
        assert "Set " not in text
