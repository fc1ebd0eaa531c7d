import sqlite3
from pathlib import Path
from typing import Dict

FIXTURE_DAY = "2024-01-15"
FIXTURE_MONTH = "2024-01"
FIXTURE_YEAR = 2024

APPLEHEALTH_SCHEMA = """
CREATE TABLE apple_record (
    id INTEGER PRIMARY KEY,
    type TEXT NOT NULL,
    unit TEXT,
    value TEXT,
    source_name TEXT,
    source_version TEXT,
    device TEXT,
    creation_date TEXT,
    start_date TEXT,
    end_date TEXT,
    day TEXT,
    timezone TEXT
);
CREATE TABLE apple_workout (
    id INTEGER PRIMARY KEY,
    workout_type TEXT NOT NULL,
    duration REAL,
    total_distance REAL,
    total_energy REAL,
    source_name TEXT,
    device TEXT,
    creation_date TEXT,
    start_date TEXT,
    end_date TEXT,
    day TEXT
);
CREATE TABLE apple_activity_summary (
    id INTEGER PRIMARY KEY,
    date_components TEXT,
    active_energy REAL,
    exercise_time REAL,
    stand_hours REAL,
    movement_energy REAL,
    day TEXT
);
"""

FOOTPRINT_SCHEMA = """
CREATE TABLE track_point (
    id INTEGER PRIMARY KEY,
    source TEXT NOT NULL,
    track_date TEXT NOT NULL,
    ts TEXT NOT NULL,
    lat REAL NOT NULL,
    lon REAL NOT NULL,
    ele REAL,
    speed REAL,
    course REAL
);
CREATE TABLE track_day_agg (
    source TEXT NOT NULL,
    day TEXT NOT NULL,
    point_count INTEGER,
    min_ts TEXT,
    max_ts TEXT,
    avg_speed REAL,
    min_lat REAL,
    max_lat REAL,
    min_lon REAL,
    max_lon REAL,
    PRIMARY KEY (source, day)
);
CREATE TABLE track_month_agg (source TEXT NOT NULL, month TEXT NOT NULL, point_count INTEGER, PRIMARY KEY (source, month));
CREATE TABLE track_year_agg (source TEXT NOT NULL, year INTEGER NOT NULL, point_count INTEGER, PRIMARY KEY (source, year));
"""

PIXIU_SCHEMA = """
CREATE TABLE pixiu_transaction (
    id INTEGER PRIMARY KEY,
    source TEXT NOT NULL,
    tx_date TEXT NOT NULL,
    category_l1 TEXT,
    category_l2 TEXT,
    inflow REAL DEFAULT 0,
    outflow REAL DEFAULT 0,
    currency TEXT,
    account TEXT,
    tags TEXT,
    note TEXT,
    year INTEGER
);
CREATE TABLE pixiu_day_agg (source TEXT, day TEXT, income REAL, expense REAL, net REAL, tx_count INTEGER);
CREATE TABLE pixiu_month_agg (source TEXT, month TEXT, income REAL, expense REAL, net REAL, tx_count INTEGER);
CREATE TABLE pixiu_year_agg (source TEXT, year INTEGER, income REAL, expense REAL, net REAL, tx_count INTEGER);
"""

# Roughly one degree of latitude per 111.2 km.
DEG_PER_M = 1 / 111195.0


def _record(conn, record_type, value, start, end, day, unit=None):
    conn.execute(
        """
        INSERT INTO apple_record(type, unit, value, source_name, device, creation_date, start_date, end_date, day, timezone)
        VALUES(?,?,?,?,?,?,?,?,?,?)
        """,
        (record_type, unit, value, "Watch", "Apple Watch", end, start, end, day, "Asia/Shanghai"),
    )


def build_applehealth_db(db_path: Path) -> None:
    with sqlite3.connect(db_path) as conn:
        conn.executescript(APPLEHEALTH_SCHEMA)
        sleep = "HKCategoryTypeIdentifierSleepAnalysis"
        # Overnight session filed partly under the previous day.
        _record(conn, sleep, "HKCategoryValueSleepAnalysisAsleepCore",
                "2024-01-14 23:00:00 +0800", "2024-01-15 00:30:00 +0800", "2024-01-14")
        _record(conn, sleep, "HKCategoryValueSleepAnalysisAsleepDeep",
                "2024-01-15 00:30:00 +0800", "2024-01-15 02:00:00 +0800", FIXTURE_DAY)
        _record(conn, sleep, "HKCategoryValueSleepAnalysisAsleepREM",
                "2024-01-15 02:00:00 +0800", "2024-01-15 03:00:00 +0800", FIXTURE_DAY)
        _record(conn, sleep, "HKCategoryValueSleepAnalysisAwake",
                "2024-01-15 03:00:00 +0800", "2024-01-15 03:15:00 +0800", FIXTURE_DAY)
        _record(conn, sleep, "HKCategoryValueSleepAnalysisAsleepCore",
                "2024-01-15 03:15:00 +0800", "2024-01-15 07:00:00 +0800", FIXTURE_DAY)
        # An afternoon nap after noon is not part of the overnight session.
        _record(conn, sleep, "HKCategoryValueSleepAnalysisAsleepCore",
                "2024-01-15 13:00:00 +0800", "2024-01-15 13:30:00 +0800", FIXTURE_DAY)

        hr = "HKQuantityTypeIdentifierHeartRate"
        for at, bpm in (("08:05", "62"), ("08:10", "98"), ("12:00", "75"), ("18:20", "70")):
            ts = f"{FIXTURE_DAY} {at}:00 +0800"
            _record(conn, hr, bpm, ts, ts, FIXTURE_DAY, "count/min")
        _record(conn, "HKQuantityTypeIdentifierRestingHeartRate", "55",
                f"{FIXTURE_DAY} 00:00:00 +0800", f"{FIXTURE_DAY} 23:59:00 +0800", FIXTURE_DAY)
        _record(conn, "HKQuantityTypeIdentifierWalkingHeartRateAverage", "96",
                f"{FIXTURE_DAY} 00:00:00 +0800", f"{FIXTURE_DAY} 23:59:00 +0800", FIXTURE_DAY)

        steps = "HKQuantityTypeIdentifierStepCount"
        for at, count in (("08:00", "3000"), ("08:30", "2500"), ("12:00", "800")):
            start = f"{FIXTURE_DAY} {at}:00 +0800"
            _record(conn, steps, count, start, start, FIXTURE_DAY, "count")
        distance = "HKQuantityTypeIdentifierDistanceWalkingRunning"
        _record(conn, distance, "2.5", f"{FIXTURE_DAY} 08:00:00 +0800", f"{FIXTURE_DAY} 08:40:00 +0800", FIXTURE_DAY, "km")
        _record(conn, distance, "0.4", f"{FIXTURE_DAY} 12:00:00 +0800", f"{FIXTURE_DAY} 12:10:00 +0800", FIXTURE_DAY, "km")

        _record(conn, "HKQuantityTypeIdentifierOxygenSaturation", "0.97",
                f"{FIXTURE_DAY} 04:00:00 +0800", f"{FIXTURE_DAY} 04:00:00 +0800", FIXTURE_DAY, "%")
        _record(conn, "HKQuantityTypeIdentifierRespiratoryRate", "14.5",
                f"{FIXTURE_DAY} 04:30:00 +0800", f"{FIXTURE_DAY} 04:30:00 +0800", FIXTURE_DAY, "count/min")
        _record(conn, "HKQuantityTypeIdentifierHeartRateVariabilitySDNN", "48",
                f"{FIXTURE_DAY} 05:00:00 +0800", f"{FIXTURE_DAY} 05:00:00 +0800", FIXTURE_DAY, "ms")
        _record(conn, "HKQuantityTypeIdentifierFlightsClimbed", "3",
                f"{FIXTURE_DAY} 09:00:00 +0800", f"{FIXTURE_DAY} 09:05:00 +0800", FIXTURE_DAY, "count")

        # A second day in the month so period statistics have more than one day.
        _record(conn, steps, "4000", "2024-01-16 10:00:00 +0800", "2024-01-16 10:00:00 +0800", "2024-01-16", "count")
        _record(conn, hr, "80", "2024-01-16 10:00:00 +0800", "2024-01-16 10:00:00 +0800", "2024-01-16", "count/min")

        conn.execute(
            """
            INSERT INTO apple_workout(workout_type, duration, total_distance, total_energy, source_name, device,
                                      creation_date, start_date, end_date, day)
            VALUES(?,?,?,?,?,?,?,?,?,?)
            """,
            (
                "HKWorkoutActivityTypeRunning", 1800, 5.2, 320, "Watch", "Apple Watch",
                f"{FIXTURE_DAY} 19:30:00 +0800", f"{FIXTURE_DAY} 19:00:00 +0800",
                f"{FIXTURE_DAY} 19:30:00 +0800", FIXTURE_DAY,
            ),
        )
        conn.execute(
            """
            INSERT INTO apple_activity_summary(date_components, active_energy, exercise_time, stand_hours,
                                               movement_energy, day)
            VALUES(?,?,?,?,?,?)
            """,
            (FIXTURE_DAY, 540, 42, 11, 540, FIXTURE_DAY),
        )


def _track(conn, start_minute, minutes, speed_mps, start_lat, ele_start=None, ele_step=0.0):
    lat = start_lat
    for i in range(minutes + 1):
        total = start_minute + i
        ts = f"{FIXTURE_DAY}T{total // 60:02d}:{total % 60:02d}:00+08:00"
        ele = None if ele_start is None else ele_start + ele_step * i
        conn.execute(
            "INSERT INTO track_point(source, track_date, ts, lat, lon, ele, speed, course) VALUES(?,?,?,?,?,?,?,?)",
            ("footprint", FIXTURE_DAY, ts, lat, 121.47, ele, speed_mps, 0),
        )
        lat += speed_mps * 60 * DEG_PER_M
    return lat


def build_footprint_db(db_path: Path) -> None:
    with sqlite3.connect(db_path) as conn:
        conn.executescript(FOOTPRINT_SCHEMA)
        # 08:00-09:00 walking at ~5 km/h, climbing 30 m.
        lat = _track(conn, 8 * 60, 60, 1.4, 31.2300, ele_start=10.0, ele_step=0.5)
        # 18:00-18:40 driving at ~54 km/h.
        end_lat = _track(conn, 18 * 60, 40, 15.0, lat)
        point_count = 61 + 41
        conn.execute(
            "INSERT INTO track_day_agg VALUES(?,?,?,?,?,?,?,?,?,?)",
            (
                "footprint", FIXTURE_DAY, point_count,
                f"{FIXTURE_DAY}T08:00:00+08:00", f"{FIXTURE_DAY}T18:40:00+08:00",
                (1.4 * 61 + 15.0 * 41) / point_count,
                31.2300, end_lat, 121.47, 121.47,
            ),
        )
        conn.execute("INSERT INTO track_month_agg VALUES(?,?,?)", ("footprint", FIXTURE_MONTH, point_count))
        conn.execute("INSERT INTO track_year_agg VALUES(?,?,?)", ("footprint", FIXTURE_YEAR, point_count))


def build_pixiu_db(db_path: Path) -> None:
    rows = [
        (f"{FIXTURE_DAY} 08:30", "餐饮", "早餐", 0, 25.5, "现金", "", "豆浆油条"),
        (f"{FIXTURE_DAY} 09:00", "收入", "工资", 10000, 0, "银行卡", "", ""),
        (f"{FIXTURE_DAY} 12:10", "餐饮", "午餐", 0, 42, "信用卡", "工作日", ""),
        ("2024-01-20 19:00", "购物", "日用", 0, 120, "信用卡", "", "超市"),
        ("2024-02-03 20:00", "交通", "打车", 0, 36, "信用卡", "", ""),
    ]
    with sqlite3.connect(db_path) as conn:
        conn.executescript(PIXIU_SCHEMA)
        for tx_date, l1, l2, inflow, outflow, account, tags, note in rows:
            conn.execute(
                """
                INSERT INTO pixiu_transaction(source, tx_date, category_l1, category_l2, inflow, outflow,
                                              currency, account, tags, note, year)
                VALUES(?,?,?,?,?,?,?,?,?,?,?)
                """,
                ("pixiu", tx_date, l1, l2, inflow, outflow, "CNY", account, tags, note, int(tx_date[:4])),
            )
        day_aggs = [
            (FIXTURE_DAY, 10000, 67.5, 9932.5, 3),
            ("2024-01-20", 0, 120, -120, 1),
            ("2024-02-03", 0, 36, -36, 1),
        ]
        for day, income, expense, net, count in day_aggs:
            conn.execute("INSERT INTO pixiu_day_agg VALUES(?,?,?,?,?,?)", ("pixiu", day, income, expense, net, count))
        conn.execute("INSERT INTO pixiu_month_agg VALUES(?,?,?,?,?,?)", ("pixiu", "2024-01", 10000, 187.5, 9812.5, 4))
        conn.execute("INSERT INTO pixiu_month_agg VALUES(?,?,?,?,?,?)", ("pixiu", "2024-02", 0, 36, -36, 1))
        conn.execute("INSERT INTO pixiu_year_agg VALUES(?,?,?,?,?,?)", ("pixiu", FIXTURE_YEAR, 10000, 223.5, 9776.5, 5))


def build_fixture_dbs(db_dir: Path) -> Dict[str, Path]:
    db_dir.mkdir(parents=True, exist_ok=True)
    paths = {
        "applehealth": db_dir / "applehealth.sqlite",
        "footprint": db_dir / "footprint.sqlite",
        "pixiu": db_dir / "pixiu.sqlite",
    }
    for path in paths.values():
        if path.exists():
            path.unlink()
    build_applehealth_db(paths["applehealth"])
    build_footprint_db(paths["footprint"])
    build_pixiu_db(paths["pixiu"])
    return paths
