from datetime import date, datetime
from pathlib import Path

import pytest

from fieldsim.data.jobs_repository import load_jobs, parse_created_at
from fieldsim.data.units_repository import DailyRoster, load_units

JOB_HEADER = (
    "JobId,Type,Description,IssueCode,IssueDescription,ActType,ActDescription,Date,Time,Priority,"
    "Suburb,Street,HouseNum1,HouseNum2,Postcode,FitterDistrict,Duration\n"
)


def _job_line(jid: str, date_token: str = "20240304", time_token: str = "08:15:00", priority: str = "2", duration: str = "45") -> str:
    return f"{jid},FLT,Fault,I01,No supply,ACT1,Inspect,{date_token},{time_token},{priority},Parramatta,Church St,10,,2150,WEST,{duration}\n"


def test_load_jobs_parses_rows_and_sorts_by_creation(tmp_path: Path):
    source = tmp_path / "jobs.csv"
    source.write_text(
        JOB_HEADER + _job_line("J2", time_token="09:00:00") + _job_line("J1", time_token="08:15"),
        encoding="utf-8",
    )

    jobs = load_jobs(source)

    assert [job.job_id for job in jobs] == ["J1", "J2"]
    first = jobs[0]
    assert first.created_at == datetime(2024, 3, 4, 8, 15, 0)
    assert first.duration_minutes == 45
    assert first.priority == 2
    assert first.suburb == "Parramatta"
    assert first.postcode == "2150"
    assert first.district == "WEST"
    assert first.assigned_unit is None and first.end_at is None


def test_load_jobs_skips_malformed_rows(tmp_path: Path, caplog):
    source = tmp_path / "jobs.csv"
    source.write_text(
        JOB_HEADER
        + _job_line("OK1")
        + _job_line("BADDATE", date_token="2024-03-04")
        + _job_line("BADPRIORITY", priority="high")
        + "SHORT,row\n"
        + _job_line("OK2", duration="60"),
        encoding="utf-8",
    )

    jobs = load_jobs(source)

    assert [job.job_id for job in jobs] == ["OK1", "OK2"]
    assert caplog.text.count("Skipping job record") == 3


def test_load_jobs_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_jobs(tmp_path / "missing.csv")


def test_parse_created_at_combines_tokens():
    assert parse_created_at("20231231", "23:59:59") == datetime(2023, 12, 31, 23, 59, 59)


def test_load_units_and_daily_roster(tmp_path: Path, caplog):
    source = tmp_path / "gsts.csv"
    source.write_text(
        "GSTId,Latitude,Longitude,District,Days\n"
        "G1,-33.81,151.01,WEST,MON;TUE\n"
        "G2,-33.90,151.20,EAST,\n"
        "G3,,151.0,EAST,\n"
        "G4,-33.7,150.9,NORTH,FUNDAY\n",
        encoding="utf-8",
    )

    units = load_units(source)

    assert [unit.unit_id for unit in units] == ["G1", "G2"]
    assert units[0].working_days == ("MON", "TUE")
    assert units[1].district == "EAST"
    assert caplog.text.count("Skipping unit record") == 2

    roster = DailyRoster(units)
    # 2024-03-04 is a Monday, 2024-03-06 a Wednesday.
    assert [u.unit_id for u in roster.units_for(date(2024, 3, 4))] == ["G1", "G2"]
    assert [u.unit_id for u in roster.units_for(date(2024, 3, 6))] == ["G2"]


def test_load_units_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_units(tmp_path / "missing.csv")
