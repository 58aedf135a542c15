import logging

from abcanon import util


def test_resolve_rules_path_prefers_given_path(monkeypatch, tmp_path):
    local = tmp_path / "chothia.dat"
    local.write_text("")
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    (elsewhere / "chothia.dat").write_text("")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KABATDIR", str(elsewhere))

    assert util.resolve_rules_path("chothia.dat").resolve() == local.resolve()


def test_resolve_rules_path_falls_back_to_environment(monkeypatch, tmp_path):
    (tmp_path / "chothia.dat").write_text("")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("KABATDIR", str(tmp_path))

    assert util.resolve_rules_path("chothia.dat") == tmp_path / "chothia.dat"


def test_resolve_rules_path_custom_variable(monkeypatch, tmp_path):
    (tmp_path / "rules.dat").write_text("")
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("MY_RULES", str(tmp_path))
    assert util.resolve_rules_path("rules.dat", env_var="MY_RULES") is not None


def test_resolve_rules_path_not_found(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("KABATDIR", raising=False)
    assert util.resolve_rules_path("chothia.dat") is None


def test_resolve_rules_path_ignores_directories(monkeypatch, tmp_path):
    (tmp_path / "chothia.dat").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("KABATDIR", raising=False)
    assert util.resolve_rules_path("chothia.dat") is None


def test_configure_logging_levels():
    util.configure_logging(True)
    assert logging.getLogger().level == logging.INFO
    util.configure_logging(False)
    assert logging.getLogger().level == logging.WARNING
