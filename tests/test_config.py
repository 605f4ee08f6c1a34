import pytest

from lpsolver import SolverSettings


def test_defaults():
    settings = SolverSettings()
    assert settings.engine == "highs"
    assert settings.scaling_mode is None
    assert settings.verbose is False


def test_from_mapping():
    settings = SolverSettings.from_mapping({"engine": "cbc", "scaling_mode": "4"})
    assert settings.engine == "cbc"
    assert settings.scaling_mode == 4


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ValueError, match="time_limit"):
        SolverSettings.from_mapping({"time_limit": 10})


def test_from_env():
    settings = SolverSettings.from_env({"LPSOLVER_ENGINE": " CBC ", "LPSOLVER_SCALING": "0"})
    assert settings.engine == "cbc"
    assert settings.scaling_mode == 0


def test_from_env_empty():
    assert SolverSettings.from_env({}) == SolverSettings()


def test_from_env_bad_scaling():
    with pytest.raises(ValueError, match="LPSOLVER_SCALING"):
        SolverSettings.from_env({"LPSOLVER_SCALING": "geometric"})
