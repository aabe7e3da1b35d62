# tests/test_storage.py
from complexobs.core.config import ComplexObsConfig
from complexobs.storage.manager import (
    discard_file,
    get_complex_obs_dir,
    make_complex_filename,
    reserve_output_file,
)


def test_make_complex_filename():
    assert make_complex_filename("42", "png") == "42.png"
    assert make_complex_filename("42", "png", 1) == "42_1.png"
    assert make_complex_filename("42", "") == "42"


def test_get_complex_obs_dir_creates_directory(tmp_path):
    cfg = ComplexObsConfig(application_data_dir=tmp_path / "appdata")
    d = get_complex_obs_dir(cfg)
    assert d.is_dir()
    assert d == tmp_path / "appdata" / "complex_obs"


def test_reserve_output_file_creates_empty_file(tmp_path):
    path, fh = reserve_output_file(tmp_path / "out", "42", "png")
    fh.close()
    assert path == tmp_path / "out" / "42.png"
    assert path.exists()
    assert path.stat().st_size == 0


def test_reserve_output_file_probes_suffixes(tmp_path):
    (tmp_path / "42.png").write_bytes(b"taken")
    (tmp_path / "42_1.png").write_bytes(b"taken")

    path, fh = reserve_output_file(tmp_path, "42", "png")
    fh.close()
    assert path.name == "42_2.png"
    # existing files untouched
    assert (tmp_path / "42.png").read_bytes() == b"taken"


def test_reserve_output_file_never_returns_same_name(tmp_path):
    names = set()
    for _ in range(5):
        path, fh = reserve_output_file(tmp_path, "7", "gif")
        fh.close()
        names.add(path.name)
    assert names == {"7.gif", "7_1.gif", "7_2.gif", "7_3.gif", "7_4.gif"}


def test_discard_file(tmp_path):
    p = tmp_path / "gone.png"
    p.write_bytes(b"x")
    assert discard_file(p) is True
    assert not p.exists()
    assert discard_file(p) is False
