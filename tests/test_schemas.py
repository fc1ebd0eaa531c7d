from apps.api.schemas import DayPixiuResponse, PeriodFootprintResponse, PeriodSummary, TimelineSlot


def test_missing_db_payload_validates():
    payload = DayPixiuResponse.model_validate({"db": "missing"})
    assert payload.db == "missing"
    assert payload.transactions == []
    assert payload.summary is None


def test_period_summary_defaults():
    summary = PeriodSummary()
    assert summary.total_steps == 0
    assert summary.avg_heart_rate is None


def test_footprint_bounds_serializes():
    payload = PeriodFootprintResponse(
        month="2024-01",
        bounds={"min_lat": 31.2, "max_lat": 31.3, "min_lon": 121.4, "max_lon": 121.5},
    )
    assert payload.model_dump()["bounds"]["max_lon"] == 121.5


def test_timeline_slot_items():
    slot = TimelineSlot(slot="08:00", hour=8, quarter=0, items=[{"type": "steps"}], has_data=True)
    assert slot.items[0]["type"] == "steps"
