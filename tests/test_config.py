import pytest

from kaperys.config import load_config


def test_missing_config_returns_empty(tmp_path):
    assert load_config(tmp_path / "site.toml") == {}


def test_load_toml(tmp_path):
    path = tmp_path / "site.toml"
    path.write_text('site_name = "Mike"\nbuild_workers = 2\n', encoding="utf-8")

    assert load_config(path) == {"site_name": "Mike", "build_workers": 2}


def test_load_yaml(tmp_path):
    path = tmp_path / "site.yaml"
    path.write_text("site_url: https://kaperys.io\nclean: false\n", encoding="utf-8")

    assert load_config(path) == {"site_url": "https://kaperys.io", "clean": False}


def test_load_empty_yaml(tmp_path):
    path = tmp_path / "site.yml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == {}


def test_load_json(tmp_path):
    path = tmp_path / "site.json"
    path.write_text('{"posts": "content"}', encoding="utf-8")

    assert load_config(path) == {"posts": "content"}


@pytest.mark.parametrize(
    "name, text",
    [
        ("site.toml", "site_name = "),
        ("site.yaml", "key: [unclosed"),
        ("site.yaml", "- a\n- b\n"),
        ("site.json", "{not json"),
        ("site.json", "[1, 2]"),
    ],
)
def test_invalid_config_exits(tmp_path, capsys, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        load_config(path)

    assert excinfo.value.code == 1
    assert str(path) in capsys.readouterr().err
