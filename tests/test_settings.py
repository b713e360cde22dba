import pytest

from keyrelay.keymaps import ConfigError, Mode
from keyrelay.runtime.settings import DEFAULT_SEQUENCE_TIMEOUT, EngineSettings


def test_defaults() -> None:
    settings = EngineSettings()

    assert settings.sequence_timeout == DEFAULT_SEQUENCE_TIMEOUT == 0.2
    assert settings.initial_mode is Mode.INSERT


def test_from_env_reads_overrides() -> None:
    settings = EngineSettings.from_env(
        {"KEYRELAY_SEQUENCE_TIMEOUT": "0.5", "KEYRELAY_INITIAL_MODE": "command"}
    )

    assert settings.sequence_timeout == 0.5
    assert settings.initial_mode is Mode.COMMAND


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KEYRELAY_SEQUENCE_TIMEOUT", "1.5")
    monkeypatch.delenv("KEYRELAY_INITIAL_MODE", raising=False)

    settings = EngineSettings.from_env()

    assert settings.sequence_timeout == 1.5
    assert settings.initial_mode is Mode.INSERT


@pytest.mark.parametrize(
    "environ",
    [
        {"KEYRELAY_SEQUENCE_TIMEOUT": "soon"},
        {"KEYRELAY_SEQUENCE_TIMEOUT": "0"},
        {"KEYRELAY_SEQUENCE_TIMEOUT": "nan"},
        {"KEYRELAY_SEQUENCE_TIMEOUT": "inf"},
        {"KEYRELAY_INITIAL_MODE": "visual"},
    ],
)
def test_from_env_rejects_invalid_values(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigError):
        EngineSettings.from_env(environ)


@pytest.mark.parametrize("timeout", [float("nan"), float("inf"), -0.1])
def test_rejects_non_finite_or_negative_timeout(timeout: float) -> None:
    with pytest.raises(ConfigError):
        EngineSettings(sequence_timeout=timeout)
