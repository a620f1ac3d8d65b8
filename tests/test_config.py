import json

from poorlaroid.config import AppConfig, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "missing.json")
    assert cfg == AppConfig()
    assert cfg.render.shader == "Retro"
    assert cfg.render.keep_cancelled_samples is True
    assert cfg.grid.width is None


def test_round_trip(tmp_path):
    cfg = AppConfig()
    cfg.grid.width, cfg.grid.height = 40, 20
    cfg.render.shader = "Noire"
    cfg.render.flip = True
    cfg.capture.folder = str(tmp_path / "shots")
    path = save_config(cfg, tmp_path / "sub" / "config.json")
    assert load_config(path) == cfg


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"render": {"shader": "Camsole", "bogus": 1}, "extra": {}}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.render.shader == "Camsole"
    assert not hasattr(cfg.render, "bogus")


def test_values_are_normalized(tmp_path):
    path = tmp_path / "config.json"
    raw = {
        "grid": {"width": 5000, "height": 0},
        "capture": {"cell_width": -3},
        "logging": {"level": "chatty", "keep_files": 0},
    }
    path.write_text(json.dumps(raw), encoding="utf-8")
    cfg = load_config(path)
    assert (cfg.grid.width, cfg.grid.height) == (512, 1)
    assert cfg.capture.cell_width == 1
    assert cfg.logging.level == "INFO"
    assert cfg.logging.keep_files == 2


def test_lowercase_level_is_accepted(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"logging": {"level": "debug"}}), encoding="utf-8")
    assert load_config(path).logging.level == "DEBUG"


def test_malformed_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == AppConfig()
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_config(path) == AppConfig()


def test_boolean_strings_are_coerced(tmp_path):
    path = tmp_path / "config.json"
    raw = {"render": {"keep_cancelled_samples": "false", "flip": "yes"}, "logging": {"console": 0}}
    path.write_text(json.dumps(raw), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.render.keep_cancelled_samples is False
    assert cfg.render.flip is True
    assert cfg.logging.console is False


def test_mistyped_values_give_defaults(tmp_path):
    path = tmp_path / "config.json"
    for raw in (
        {"grid": {"width": "wide"}},
        {"render": {"flip": "sideways"}},
        {"capture": ["cell_width", 4]},
    ):
        path.write_text(json.dumps(raw), encoding="utf-8")
        assert load_config(path) == AppConfig()


def test_null_section_keeps_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"grid": None, "render": {"shader": "Noire"}}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.grid == AppConfig().grid
    assert cfg.render.shader == "Noire"
