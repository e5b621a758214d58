import json

import pytest

from src.timetable import cli
from tests.feed_rows import V1_HEADER, V2_HEADER, to_csv, v1_row, v2_row


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def feed_file(tmp_path):
    path = tmp_path / "calendar.csv"
    path.write_text(
        to_csv(
            [
                V1_HEADER,
                v1_row(date_text="16/2/26", start="09:00", public_name="Yoga"),
                v1_row(date_text="24/2/26", start="14:00", public_name="Chess"),
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_prints_table_for_current_week(feed_file, capsys):
    code = cli.main(["--file", str(feed_file), "--today", "2026-02-18"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.startswith("Week of 16 Feb - 22 Feb")
    assert "Yoga" in out
    assert "Chess" not in out


def test_week_offset_and_json(feed_file, capsys):
    code = cli.main(["--file", str(feed_file), "--today", "2026-02-18", "--week-offset", "1", "--json"])

    data = json.loads(capsys.readouterr().out)
    assert code == 0
    assert data["offset"] == 1
    assert data["days"][1]["pm"][0]["public_name"] == "Chess"


def test_several_weeks(feed_file, capsys):
    code = cli.main(["--file", str(feed_file), "--today", "2026-02-18", "--weeks", "3"])

    out = capsys.readouterr().out
    assert code == 0
    assert out.count("Week of") == 3
    assert "(no sessions this week)" in out


def test_missing_file_exits_1(tmp_path, capsys):
    code = cli.main(["--file", str(tmp_path / "nope.csv")])

    captured = capsys.readouterr()
    assert code == 1
    assert captured.out == ""
    assert "Unable to load schedule" in captured.err


def test_missing_url_exits_2(capsys):
    assert cli.main([]) == 2
    assert "TIMETABLE_FEED_URL" in capsys.readouterr().err


def test_schema_and_room_override_from_environment(tmp_path, monkeypatch, capsys):
    path = tmp_path / "bookings.csv"
    path.write_text(
        to_csv(
            [
                V2_HEADER,
                v2_row(room="Car Park", public_name="Car Boot Sale"),
                v2_row(room="Sports Hall", public_name="Pickleball"),
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("TIMETABLE_FEED_SCHEMA", "v2")
    monkeypatch.setenv("TIMETABLE_ALLOWED_ROOMS", "Car Park, Field")

    code = cli.main(["--file", str(path), "--today", "2026-02-16"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Car Boot Sale" in out
    assert "Pickleball" not in out


def test_bad_arguments_exit_2():
    with pytest.raises(SystemExit) as exc:
        cli.main(["--weeks", "0"])
    assert exc.value.code == 2
