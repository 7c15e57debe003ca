import pytest

from kaperys.errors import BuildError, UnsafeOutputDir
from kaperys.utils import clean_output_dir, config_flag, site_link, write_host_files


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), ("yes", True), ("On", True), (1, True), ("no", False), (0, False), (False, False)],
)
def test_config_flag(value, expected):
    assert config_flag(value, not expected) is expected


def test_config_flag_missing_uses_default():
    assert config_flag(None, True) is True
    assert config_flag(None, False) is False


def test_site_link():
    assert site_link("https://kaperys.io/", "/trust") == "https://kaperys.io/trust"
    assert site_link("https://kaperys.io", "2023-01-01-hello") == "https://kaperys.io/2023-01-01-hello"
    assert site_link("https://kaperys.io") == "https://kaperys.io/"


def test_write_host_files(tmp_path):
    write_host_files(tmp_path, "kaperys.io", True)

    assert (tmp_path / "CNAME").read_text(encoding="utf-8") == "kaperys.io\n"
    assert (tmp_path / ".nojekyll").exists()


def test_write_host_files_skips_when_unset(tmp_path):
    write_host_files(tmp_path, "", False)

    assert list(tmp_path.iterdir()) == []


def test_clean_output_dir_refuses_project_root(tmp_path):
    with pytest.raises(UnsafeOutputDir, match="project root"):
        clean_output_dir(tmp_path, tmp_path)


def test_clean_output_dir_refuses_outside_root(tmp_path):
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    project = tmp_path / "project"
    project.mkdir()

    with pytest.raises(BuildError) as excinfo:
        clean_output_dir(outside, project)

    assert excinfo.value.path == outside
    assert outside.exists()


def test_clean_output_dir_removes_output(tmp_path):
    out = tmp_path / "out"
    (out / "old.html").parent.mkdir()
    (out / "old.html").write_text("x", encoding="utf-8")

    clean_output_dir(out, tmp_path)

    assert not out.exists()
