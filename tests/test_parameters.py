from datetime import timedelta

import pytest

from goalcards.fsrs import DEFAULT_WEIGHTS, InvalidParametersError, SchedulerParameters
from goalcards.fsrs.parameters import format_step, parse_step, parse_steps


def test_defaults():
    params = SchedulerParameters()
    assert params.weights == DEFAULT_WEIGHTS
    assert params.request_retention == 0.9
    assert params.maximum_interval == 36500
    assert params.learning_steps == (timedelta(minutes=1), timedelta(minutes=10))
    assert params.relearning_steps == (timedelta(minutes=10),)
    assert not params.enable_fuzz
    assert params.enable_short_term
    assert params.version == "fsrs-5"


def test_legacy_weights_are_padded():
    params = SchedulerParameters(weights=DEFAULT_WEIGHTS[:17])
    assert len(params.w) == 19
    assert params.w[17:] == (0.0, 0.0)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"weights": (1.0,) * 10},
        {"weights": (0.0,) + DEFAULT_WEIGHTS[1:]},
        {"weights": (float("nan"),) + DEFAULT_WEIGHTS[1:]},
        {"request_retention": 1.0},
        {"request_retention": 0.0},
        {"minimum_interval": 0},
        {"maximum_interval": 0},
        {"learning_steps": (timedelta(0),)},
        {"minimum_stability": 0.0},
        {"minimum_stability": float("inf")},
        {"minimum_difficulty": 0.0},
        {"minimum_difficulty": 5.0, "maximum_difficulty": 5.0},
        {"maximum_difficulty": float("nan")},
    ],
)
def test_invalid_parameters_raise(kwargs):
    with pytest.raises(InvalidParametersError) as excinfo:
        SchedulerParameters(**kwargs)
    assert excinfo.value.kind == "configuration"


def test_parse_steps():
    assert parse_step("1m") == timedelta(minutes=1)
    assert parse_step(" 2H ") == timedelta(hours=2)
    assert parse_step("1.5d") == timedelta(days=1, hours=12)
    assert parse_steps("1m, 10m") == (timedelta(minutes=1), timedelta(minutes=10))
    assert parse_steps("") == ()
    with pytest.raises(InvalidParametersError):
        parse_step("5x")
    with pytest.raises(InvalidParametersError):
        parse_step("0m")


def test_format_step():
    assert format_step(timedelta(minutes=10)) == "10m"
    assert format_step(timedelta(days=1)) == "1d"
    assert format_step(timedelta(seconds=90)) == "90s"


def test_from_env_reads_overrides():
    env = {
        "FSRS_REQUEST_RETENTION": "0.85",
        "FSRS_MAXIMUM_INTERVAL": "365",
        "FSRS_LEARNING_STEPS": "",
        "FSRS_RELEARNING_STEPS": "5m,1h",
        "FSRS_ENABLE_FUZZ": "yes",
        "FSRS_ENABLE_SHORT_TERM": "false",
    }
    params = SchedulerParameters.from_env(env)
    assert params.request_retention == 0.85
    assert params.maximum_interval == 365
    assert params.learning_steps == ()
    assert params.relearning_steps == (timedelta(minutes=5), timedelta(hours=1))
    assert params.enable_fuzz
    assert not params.enable_short_term


def test_from_env_weights():
    env = {"FSRS_WEIGHTS": ",".join(str(w) for w in DEFAULT_WEIGHTS[:17])}
    params = SchedulerParameters.from_env(env)
    assert params.w[:17] == DEFAULT_WEIGHTS[:17]


def test_from_env_empty_mapping_gives_defaults():
    assert SchedulerParameters.from_env({}) == SchedulerParameters()


def test_from_env_reads_process_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FSRS_REQUEST_RETENTION", "0.8")
    assert SchedulerParameters.from_env().request_retention == 0.8


@pytest.mark.parametrize(
    "env",
    [
        {"FSRS_REQUEST_RETENTION": "high"},
        {"FSRS_ENABLE_FUZZ": "maybe"},
        {"FSRS_MAXIMUM_INTERVAL": "1.5"},
        {"FSRS_LEARNING_STEPS": "1m,soon"},
    ],
)
def test_from_env_rejects_garbage(env):
    with pytest.raises(InvalidParametersError):
        SchedulerParameters.from_env(env)


def test_to_dict():
    data = SchedulerParameters().to_dict()
    assert data["learning_steps"] == ["1m", "10m"]
    assert data["version"] == "fsrs-5"
    assert len(data["weights"]) == 19
    assert data["minimum_stability"] == 0.01
    assert (data["minimum_difficulty"], data["maximum_difficulty"]) == (1.0, 10.0)
