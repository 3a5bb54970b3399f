from dataclasses import asdict, fields

import pytest

from canis.config import ProjectConfig, get_config, init, load_config, parse_config


@pytest.fixture
def restore_config():
    saved = asdict(get_config())
    yield get_config()
    for item in fields(ProjectConfig):
        setattr(get_config(), item.name, saved[item.name])


def test_defaults():
    config = parse_config("")
    assert config == ProjectConfig()
    assert config.width == 1280
    assert config.height == 800


def test_reads_all_keys():
    config = parse_config(
        "fullscreen true\nwidth 640\nheigth 480\nuse_frame_limit true\n"
        "frame_limit 30\noverride_seed true\nseed 77\nlog true\nvolume 0.5\n"
    )
    assert config.fullscreen is True
    assert config.width == 640
    assert config.height == 480
    assert config.use_frame_limit is True
    assert config.frame_limit == 30
    assert config.override_seed is True
    assert config.seed == 77
    assert config.log is True
    assert config.volume == pytest.approx(0.5)


def test_flag_other_than_true_is_false():
    assert parse_config("fullscreen yes").fullscreen is False


def test_volume_is_clamped():
    assert parse_config("volume 3").volume == pytest.approx(1.5)
    assert parse_config("volume -2").volume == pytest.approx(0.0)


def test_unknown_words_are_skipped():
    config = parse_config("colour blue width 320")
    assert config.width == 320


def test_bad_number_stops_parsing():
    config = parse_config("width abc log true")
    assert config.width == ProjectConfig().width
    assert config.log is False


def test_missing_value_keeps_default():
    assert parse_config("fullscreen").fullscreen is False


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.canis")


def test_init_updates_shared_config(tmp_path, restore_config):
    path = tmp_path / "project.canis"
    path.write_text("width 1024 log true")
    result = init(path)
    assert result is get_config()
    assert get_config().width == 1024
    assert get_config().log is True


def test_init_without_file_keeps_settings(tmp_path, restore_config):
    get_config().width = 999
    init(tmp_path / "absent.canis")
    assert get_config().width == 999