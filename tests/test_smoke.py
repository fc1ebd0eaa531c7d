from pathlib import Path

from packages.db import SOURCES, check_source, source_exists

ROOT = Path(__file__).resolve().parents[1]


def test_local_sources_usable_or_skip():
    for source in SOURCES:
        if not source_exists(source):
            continue
        assert check_source(source) == []


def test_fixture_builder_present():
    assert (ROOT / "tests" / "fixtures" / "build_fixture_db.py").exists()


def test_run_tests_can_skip_live_server_modules():
    import argparse

    from scripts.run_tests import E2E_MODULES, build_command

    cmd = build_command(argparse.Namespace(no_e2e=True, keyword="cache"), ["-x"])
    for module in E2E_MODULES:
        assert module in cmd
    assert cmd[-3:] == ["-k", "cache", "-x"]

    cmd = build_command(argparse.Namespace(no_e2e=False, keyword=None), [])
    assert "--ignore" not in cmd
