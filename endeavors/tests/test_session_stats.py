import pytest

from endeavors.domain.session_stats import (
    format_duration,
    generate_progressed_weeks,
    session_stats,
    set_duration,
    time_under_tension,
)


def test_time_under_tension():
    assert time_under_tension(10) == 30           # default 2010
    assert time_under_tension(8, "X1X1") == 16
    assert time_under_tension(5, "30") == 15      # padded to 3000
    assert time_under_tension(0, "4010") == 0
    # stored sets may carry a numeric tempo
    assert time_under_tension(10, 3010) == 40


def test_set_duration_prefers_explicit_duration():
    assert set_duration({"duration": 5, "durationUnit": "minutes"}) == 300
    assert set_duration({"duration": 45, "durationUnit": "seconds"}) == 45
    assert set_duration({"reps": 10, "tempo": "3010"}) == 40


def test_format_duration():
    assert format_duration(45) == "45s"
    assert format_duration(61) == "2 minutes"
    assert format_duration(120) == "2 minutes"


def test_session_stats_totals():
    exercises = [{
        "planned_sets": [
            {"reps": 10, "load": "100", "loadUnit": "lbs", "restSec": 60, "tempo": "3010"},
            {"reps": 10, "load": "50", "loadUnit": "kg", "restSec": 60},
        ]
    }]
    st = session_stats(exercises, "lbs")
    assert st["duration_seconds"] == 40 + 30 + 120
    assert st["estimated_duration"] == "4 minutes"
    assert st["total_sets"] == 2 and st["total_reps"] == 20 and st["total_exercises"] == 1
    # the session planner converts with 2.2
    assert st["total_load"] == 2100.0


def _base(reps=(10, 10, 10), load="100"):
    return [{"pairing": "A1", "planned_sets": [{"reps": r, "load": load, "loadUnit": "lbs"} for r in reps]}]


def test_linear_progression_loads_and_reps():
    base = _base()
    rules = {"type": "Linear", "settings": {"load_increment_percentage": 2.5, "volume_increment_percentage": 5}}
    weeks = generate_progressed_weeks(base, 3, rules)
    assert sorted(weeks) == [1, 2, 3]
    w1, w2 = weeks[1][0]["planned_sets"], weeks[2][0]["planned_sets"]
    assert [s["load"] for s in w1] == ["100"] * 3
    assert [s["reps"] for s in w1] == [10, 10, 10]
    assert w2[0]["load"] == "102.5"
    # 30 * 1.05 = 31.5 -> 32 reps, earlier sets take the remainder
    assert [s["reps"] for s in w2] == [11, 11, 10]
    assert weeks[3][0]["planned_sets"][0]["load"] == "105"
    # base week untouched
    assert base[0]["planned_sets"][0]["reps"] == 10


def test_undulating_progression():
    rules = {"type": "Undulating", "settings": {"weekly_volume_percentages": [100, 80, 120]}}
    weeks = generate_progressed_weeks(_base((10,)), 4, rules)
    assert [weeks[w][0]["planned_sets"][0]["reps"] for w in (1, 2, 3, 4)] == [10, 8, 12, 10]


def test_sub_sets_progress_and_unknown_type_copies():
    base = [{"planned_sets": [{"reps": 10, "load": "100", "subSets": [{"reps": 5, "load": "80"}]}]}]
    rules = {"type": "Linear", "settings": {"load_increment_percentage": 10, "volume_increment_percentage": 0}}
    weeks = generate_progressed_weeks(base, 2, rules)
    assert weeks[2][0]["planned_sets"][0]["subSets"][0]["load"] == "88"

    same = generate_progressed_weeks(base, 2, {"type": "Block"})
    assert same[2] == base


def test_program_length_must_be_positive():
    with pytest.raises(ValueError):
        generate_progressed_weeks(_base(), 0, None)
