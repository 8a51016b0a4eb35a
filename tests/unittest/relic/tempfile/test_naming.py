import os
import random
import string
import tempfile
from types import SimpleNamespace

import pytest

from relic.tempfile.definitions import NAME_LENGTH, TempFileOptions
from relic.tempfile import naming
from relic.tempfile.naming import get_name, random_string

_ALNUM = set(string.ascii_letters + string.digits)


def _random_part(name: str, prefix: str, ext: str) -> str:
    base = os.path.basename(name)
    assert base.startswith(prefix)
    assert base.endswith(ext)
    return base[len(prefix) : len(base) - len(ext)]


class TestRandomString:
    def test_default_length(self):
        result = random_string()
        assert len(result) == NAME_LENGTH

    @pytest.mark.parametrize("size", [0, 1, 7, 64])
    def test_length(self, size: int):
        assert len(random_string(size)) == size

    def test_alphabet(self):
        result = random_string(500)
        assert set(result) <= _ALNUM

    def test_seeded_rng_is_deterministic(self):
        first = random_string(rng=random.Random(42))
        second = random_string(rng=random.Random(42))
        assert first == second


@pytest.mark.parametrize("prefix", ["", "prefix_", "relic-"])
@pytest.mark.parametrize(
    ["ext", "expected_ext"],
    [(None, ".tmp"), (".tmp", ".tmp"), ("my_ext", ".my_ext"), (".sga", ".sga")],
)
def test_get_name(tmp_path, prefix: str, ext, expected_ext: str):
    result = get_name(prefix, ext=ext, dir=str(tmp_path))
    assert os.path.dirname(result) == str(tmp_path)
    assert os.path.splitext(result)[1] == expected_ext
    random_part = _random_part(result, prefix, expected_ext)
    assert len(random_part) == NAME_LENGTH
    assert set(random_part) <= _ALNUM


def test_get_name_defaults():
    result = get_name()
    assert os.path.dirname(result) == tempfile.gettempdir()
    assert result.endswith(".tmp")
    assert len(os.path.basename(result)) == NAME_LENGTH + len(".tmp")


def test_get_name_does_not_touch_filesystem(tmp_path):
    missing = tmp_path / "missing"
    result = get_name(dir=str(missing))
    assert not os.path.exists(result)
    assert not missing.exists()


def test_get_name_options_and_overrides(tmp_path):
    options = TempFileOptions(prefix="opt_", ext="dat", dir=str(tmp_path))
    from_options = get_name(options=options)
    assert os.path.basename(from_options).startswith("opt_")
    assert from_options.endswith(".dat")

    overridden = get_name("kw_", ext=".bin", options=options)
    assert os.path.basename(overridden).startswith("kw_")
    assert overridden.endswith(".bin")
    assert os.path.dirname(overridden) == str(tmp_path)


def test_get_name_unique():
    names = {get_name() for _ in range(2000)}
    assert len(names) == 2000


def test_get_name_unique_within_one_clock_tick(monkeypatch):
    frozen_clock = SimpleNamespace(perf_counter_ns=lambda: 1, time_ns=lambda: 1)
    monkeypatch.setattr(naming, "time", frozen_clock)
    names = [get_name() for _ in range(200)]
    assert len(set(names)) == len(names)


def test_get_name_expands_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    result = get_name(dir="~")
    assert os.path.dirname(result) == str(tmp_path)
