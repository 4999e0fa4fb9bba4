from pathlib import Path

import pytest

from fieldsim import cli
from fieldsim.exceptions import RoutingError
from fieldsim.models.domain import Coordinate

JOBS_CSV = (
    "JobId,Type,Description,IssueCode,IssueDescription,ActType,ActDescription,Date,Time,Priority,"
    "Suburb,Street,HouseNum1,HouseNum2,Postcode,FitterDistrict,Duration\n"
    "J1,FLT,Fault,I01,No supply,ACT1,Inspect,20240304,08:00:00,1,Parramatta,Church St,10,,2150,WEST,30\n"
)
UNITS_CSV = "GSTId,Latitude,Longitude,District,Days\nG1,-33.81,151.01,WEST,\n"


class DummyRouting:
    def geocode(self, query):
        return Coordinate(-33.80, 151.00)

    def isochrone(self, origin, time_budget_seconds, depart_at):
        return [Coordinate(-33.9, 150.9), Coordinate(-33.9, 151.1), Coordinate(-33.7, 151.1), Coordinate(-33.7, 150.9)]

    def route_time(self, origin, destination, depart_at):
        return 300


@pytest.fixture
def inputs(tmp_path: Path) -> tuple[Path, Path]:
    jobs = tmp_path / "jobs.csv"
    units = tmp_path / "gsts.csv"
    jobs.write_text(JOBS_CSV, encoding="utf-8")
    units.write_text(UNITS_CSV, encoding="utf-8")
    return jobs, units


def test_cli_runs_with_explicit_paths(inputs, tmp_path: Path, capsys):
    jobs, units = inputs
    job_report = tmp_path / "out" / "jobs_report.csv"
    unit_report = tmp_path / "out" / "units_report.csv"

    code = cli.main([str(jobs), str(units), str(job_report), str(unit_report)], routing=DummyRouting())

    assert code == 0
    assert "Compliance Rate: 100%" in job_report.read_text(encoding="utf-8")
    assert unit_report.read_text(encoding="utf-8").splitlines()[1].startswith("G1,WEST,1,J1")
    assert "SIMULATION SUMMARY" in capsys.readouterr().out


def test_cli_falls_back_to_defaults_unless_all_paths_given(inputs, tmp_path: Path, monkeypatch):
    jobs, units = inputs
    monkeypatch.setattr(cli.settings, "job_file", jobs)
    monkeypatch.setattr(cli.settings, "unit_file", units)
    monkeypatch.setattr(cli.settings, "job_report_file", tmp_path / "default_jobs.csv")
    monkeypatch.setattr(cli.settings, "unit_report_file", tmp_path / "default_units.csv")

    code = cli.main([str(tmp_path / "ignored.csv"), str(tmp_path / "ignored_units.csv")], routing=DummyRouting())

    assert code == 0
    assert (tmp_path / "default_jobs.csv").exists()
    assert (tmp_path / "default_units.csv").exists()


def test_cli_missing_input_exits_with_data_error(tmp_path: Path):
    paths = [str(tmp_path / name) for name in ("nope.csv", "nope_units.csv", "a.csv", "b.csv")]
    assert cli.main(paths, routing=DummyRouting()) == 1


def test_cli_routing_failure_exits_with_abort_code(inputs, tmp_path: Path):
    class BrokenRouting(DummyRouting):
        def geocode(self, query):
            raise RoutingError("service down")

    jobs, units = inputs
    code = cli.main([str(jobs), str(units), str(tmp_path / "a.csv"), str(tmp_path / "b.csv")], routing=BrokenRouting())

    assert code == 2
    assert not (tmp_path / "a.csv").exists()


def test_cli_relative_paths_resolve_against_working_directory(inputs, tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    code = cli.main(["jobs.csv", "gsts.csv", "out_jobs.csv", "out_units.csv"], routing=DummyRouting())

    assert code == 0
    assert (tmp_path / "out_jobs.csv").exists()
    assert (tmp_path / "out_units.csv").exists()
    assert (tmp_path / "out_jobs.summary.json").exists()


def test_cli_missing_subscription_key_exits_with_config_error(inputs, tmp_path: Path, monkeypatch):
    monkeypatch.setattr(cli.settings, "routing_subscription_key", None)
    jobs, units = inputs

    code = cli.main([str(jobs), str(units), str(tmp_path / "a.csv"), str(tmp_path / "b.csv")])

    assert code == 1
    assert not (tmp_path / "a.csv").exists()
