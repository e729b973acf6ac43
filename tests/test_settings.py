from __future__ import annotations

from pathlib import Path

import pytest

from traction_ai.agents.registry import DEFAULT_AGENT_SEEDS, AgentStatus
from traction_ai.configuration import deep_merge, discover_project_config, load_project_config
from traction_ai.errors import ConfigurationError
from traction_ai.recommender.classifier import ClassificationThresholds
from traction_ai.resources import load_defaults, load_yaml_mapping
from traction_ai.settings import TractionSettings, load_settings

from tests.conftest import write_pyproject


pytestmark = pytest.mark.usefixtures("isolated_config")


def test_bundled_defaults_match_module_defaults() -> None:
    settings = TractionSettings.from_config(load_defaults())

    assert settings == TractionSettings(logging=settings.logging)
    assert settings.agents == DEFAULT_AGENT_SEEDS
    assert settings.logging == {"level": "info", "output": "stderr", "format": "json"}


def test_load_settings_without_project_file_uses_defaults() -> None:
    settings = load_settings()

    assert settings.thresholds == ClassificationThresholds(8.0, 12.0)
    assert settings.analysis_window == 10
    assert settings.analysis_delay == 2.0
    assert settings.buffer_capacity == 20
    assert settings.tick_interval == 1.5


def test_pyproject_overrides_are_deep_merged(tmp_path: Path) -> None:
    write_pyproject(
        tmp_path,
        """
        [project]
        name = "dashboard"

        [tool.traction_ai.thresholds]
        slip_critical = 14.0

        [tool.traction_ai.analysis]
        window = 5
        delay = 0.5
        """,
    )

    settings = load_settings(tmp_path)

    assert settings.thresholds == ClassificationThresholds(warning=8.0, critical=14.0)
    assert settings.analysis_window == 5
    assert settings.analysis_delay == 0.5
    assert settings.analysis_thresholds.high == 10.0


def test_environment_variable_points_at_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_dir = tmp_path / "elsewhere"
    config_dir.mkdir()
    write_pyproject(
        config_dir,
        """
        [tool.traction_ai.buffer]
        capacity = 50
        """,
    )
    monkeypatch.setenv("TRACTION_AI_CONFIG", str(config_dir))

    config = discover_project_config()

    assert config["buffer"] == {"capacity": 50}
    assert config["_config_path"] == str((config_dir / "pyproject.toml").resolve())


def test_pyproject_without_tool_section_is_ignored(tmp_path: Path) -> None:
    write_pyproject(tmp_path, "[project]\nname = 'other'\n")

    assert load_project_config(tmp_path) is None
    assert discover_project_config(tmp_path) == {"_config_path": None}


def test_agents_can_be_reseeded_from_config() -> None:
    settings = TractionSettings.from_config(
        {
            "agents": [
                {"id": "slip-detection", "name": "Slip", "status": "active", "last_action": "Watching", "confidence": 99},
                {"id": "tyre-temp", "name": "Tyre Temperature", "status": "idle", "confidence": 80},
            ]
        }
    )

    assert [agent.id for agent in settings.agents] == ["slip-detection", "tyre-temp"]
    assert settings.agents[1].status is AgentStatus.IDLE


@pytest.mark.parametrize(
    "config",
    [
        pytest.param({"thresholds": {"slip_warning": 12.0, "slip_critical": 8.0}}, id="inverted-thresholds"),
        pytest.param({"thresholds": {"slip_warning": "high"}}, id="non-numeric-threshold"),
        pytest.param({"analysis": {"window": 0}}, id="zero-window"),
        pytest.param({"analysis": {"window": 2.5}}, id="fractional-window"),
        pytest.param({"analysis": {"delay": -1}}, id="negative-delay"),
        pytest.param({"buffer": {"capacity": "big"}}, id="non-numeric-capacity"),
        pytest.param({"scheduler": 3}, id="section-not-a-table"),
        pytest.param({"agents": []}, id="empty-agents"),
        pytest.param({"agents": [{"id": "a", "name": "A", "confidence": 300}]}, id="bad-confidence"),
        pytest.param(
            {"agents": [{"id": "a", "name": "A"}, {"id": "a", "name": "B"}]},
            id="duplicate-agents",
        ),
    ],
)
def test_invalid_settings_raise_configuration_error(config: dict) -> None:
    with pytest.raises(ConfigurationError):
        TractionSettings.from_config(config)


def test_deep_merge_keeps_untouched_branches() -> None:
    merged = deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})

    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}


def test_load_yaml_mapping_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf8")

    with pytest.raises(TypeError):
        load_yaml_mapping(path)
    with pytest.raises(FileNotFoundError):
        load_yaml_mapping(tmp_path / "missing.yaml")


def test_malformed_pyproject_raises_configuration_error(tmp_path: Path) -> None:
    write_pyproject(tmp_path, "[tool.traction_ai\n")

    with pytest.raises(ConfigurationError, match="Malformed TOML"):
        load_settings(tmp_path)


def test_yaml_file_is_accepted_as_project_config(tmp_path: Path) -> None:
    settings_file = tmp_path / "overrides.yml"
    settings_file.write_text("buffer:\n  capacity: 5\nscheduler:\n  interval: 0.25\n", encoding="utf8")

    settings = load_settings(settings_file)

    assert settings.buffer_capacity == 5
    assert settings.tick_interval == 0.25
    assert settings.thresholds == ClassificationThresholds(8.0, 12.0)
    assert discover_project_config(settings_file)["_config_path"] == str(settings_file.resolve())


def test_yaml_config_that_is_not_a_mapping_is_rejected(tmp_path: Path) -> None:
    settings_file = tmp_path / "overrides.yaml"
    settings_file.write_text("- capacity\n", encoding="utf8")

    with pytest.raises(ConfigurationError):
        discover_project_config(settings_file)


def test_unsupported_config_suffix_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unsupported configuration file"):
        load_project_config(tmp_path / "settings.json")
