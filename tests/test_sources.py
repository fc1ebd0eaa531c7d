import importlib
import os
import sqlite3
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from tests.fixtures.build_fixture_db import FIXTURE_DAY, build_fixture_dbs


@pytest.fixture()
def db_paths():
    with TemporaryDirectory() as tmpdir:
        paths = build_fixture_dbs(Path(tmpdir))
        os.environ["LIFELOG_APPLEHEALTH_DB_PATH"] = str(paths["applehealth"])
        os.environ["LIFELOG_FOOTPRINT_DB_PATH"] = str(paths["footprint"])
        os.environ["LIFELOG_PIXIU_DB_PATH"] = str(paths["pixiu"])
        import packages.config as config
        importlib.reload(config)
        yield paths


def test_source_checks_pass(db_paths):
    from packages.db import SOURCES, check_source

    for source in SOURCES:
        assert check_source(source) == []


def test_source_check_reports_missing(db_paths):
    from packages.db import check_source

    db_paths["footprint"].unlink()
    problems = check_source("footprint")
    assert len(problems) == 1
    assert "not found" in problems[0]

    with sqlite3.connect(db_paths["pixiu"]) as conn:
        conn.execute("DROP TABLE pixiu_year_agg")
    assert check_source("pixiu") == ["pixiu: missing table pixiu_year_agg"]


def test_source_version_tracks_file(db_paths):
    from packages.db import source_version

    before = source_version("pixiu")
    stat = db_paths["pixiu"].stat()
    os.utime(db_paths["pixiu"], ns=(stat.st_atime_ns, stat.st_mtime_ns + 1_000_000_000))
    assert source_version("pixiu") != before

    db_paths["pixiu"].unlink()
    assert source_version("pixiu") is None


def test_connections_are_read_only(db_paths):
    from packages.db import connect

    with connect("pixiu") as conn:
        with pytest.raises(sqlite3.OperationalError):
            conn.execute("DELETE FROM pixiu_transaction")


def test_unknown_source():
    from packages.db import UnknownSourceError, source_path

    with pytest.raises(UnknownSourceError):
        source_path("fitbit")


def test_applehealth_day_includes_previous_night(db_paths):
    from services.sources.applehealth import AppleHealthSource

    raw = AppleHealthSource().get_day_data(FIXTURE_DAY)
    days = {row["day"] for row in raw["records"]}
    assert days == {"2024-01-14", FIXTURE_DAY}
    assert raw["activity_summary"]["active_energy"] == 540
