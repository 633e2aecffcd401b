from pathlib import Path

import pytest

from metgeoms.config import Config


def test_defaults_are_valid():
    config = Config()
    assert config.validate()
    assert config.na_fill == "reject"
    assert config.exclude == []
    assert config.tanaka_sun_angle == 60
    assert isinstance(config.output_dir, Path)


def test_instances_do_not_share_exclude():
    a = Config()
    b = Config()
    a.exclude.append(5.0)
    assert b.exclude == []


@pytest.mark.parametrize("suffix", [".yaml", ".json"])
def test_round_trip_through_file(tmp_path, suffix):
    config = Config(binwidth=4.0, na_fill="spline", exclude=[0.0], tanaka_width_range=(0.2, 2.0))
    path = tmp_path / f"config{suffix}"
    config.save_to_file(path)

    loaded = Config.load_from_file(path)
    assert loaded == config
    assert loaded.tanaka_width_range == (0.2, 2.0)


def test_unknown_suffix_raises(tmp_path):
    with pytest.raises(ValueError):
        Config().save_to_file(tmp_path / "config.toml")

    path = tmp_path / "config.txt"
    path.write_text("bins: 3\n")
    with pytest.raises(ValueError):
        Config.load_from_file(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.load_from_file(tmp_path / "absent.yaml")


def test_partial_yaml_keeps_defaults(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("bins: 4\nna_fill: 0\noutput_dir: charts\n")
    config = Config.load_from_file(path)
    assert config.bins == 4
    assert config.na_fill == 0
    assert config.output_dir == Path("charts")
    assert config.cmap == "viridis"


@pytest.mark.parametrize(
    "overrides",
    [
        {"bins": 0},
        {"binwidth": -1.0},
        {"na_fill": "nearest"},
        {"na_fill": [1, 2]},
        {"line_width": 0},
        {"tanaka_width_range": (2.0, 1.0)},
        {"relief_altitude": 95},
        {"vector_skip": 0},
        {"vector_min_mag": -1},
        {"streamline_density": 0},
        {"default_dpi": 0},
        {"figure_width": -5},
    ],
)
def test_invalid_values_raise(overrides):
    with pytest.raises(ValueError):
        Config(**overrides).validate()


def test_ensure_directories(tmp_path):
    config = Config(output_dir=tmp_path / "out" / "charts")
    config.ensure_directories()
    assert config.output_dir.is_dir()
