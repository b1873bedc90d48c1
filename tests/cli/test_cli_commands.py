"""End-to-end command tests against a file-backed config and local feeds."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from placesync.cli import main


@pytest.fixture
def project(tmp_path: Path, sample_kml: str, sample_list_payload: str) -> Path:
    feeds = tmp_path / "feeds"
    feeds.mkdir()
    (feeds / "map-1.kml").write_text(sample_kml, encoding="utf-8")
    (feeds / "list-1.json").write_text(sample_list_payload, encoding="utf-8")

    config_path = tmp_path / "placesync.json"
    config_path.write_text(
        json.dumps(
            {
                "fetcher": "file",
                "feeds_dir": "feeds",
                "storage_dir": "store",
                "sources": [
                    {"id": "pauls-map", "name": "Paul's Map", "owner": "Paul", "fetch_id": "map-1"},
                    {"id": "kyoto-list", "name": "Kyoto List", "fetch_id": "list-1", "format": "maps_list"},
                    {"id": "missing-map", "name": "Missing Map", "fetch_id": "nowhere"},
                ],
            }
        ),
        encoding="utf-8",
    )
    return config_path


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, str, str]:
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


def _sync_both(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    for source_id in ("pauls-map", "kyoto-list"):
        code, _, _ = _run(capsys, "sync", "--config", str(project), "--source", source_id, "-v")
        assert code == 0


def test_sync_source_persists_places(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "sync", "--config", str(project), "--source", "pauls-map")

    assert code == 0
    assert "sync complete (1/1 source succeeded)" in out
    assert "Paul's Map: 3 found" in out
    stored = json.loads((project.parent / "store" / "places.json").read_text(encoding="utf-8"))
    assert [place["id"] for place in stored["originalPlaces"]] == ["shibuya-station", "ichiran-ramen", "dotonbori"]
    assert stored["placeSources"]["dotonbori"] == "pauls-map"


def test_sync_all_reports_failed_source(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "sync", "--config", str(project), "--all", "-v")

    assert code == 4
    assert "sync complete (2/3 sources succeeded)" in out
    assert "Missing Map: failed" in out
    assert "No feed file for Missing Map" in out


def test_resync_skips_duplicates(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(capsys, "sync", "--config", str(project), "--source", "pauls-map", "-v")

    code, out, _ = _run(capsys, "sync", "--config", str(project), "--source", "pauls-map", "-v")

    assert code == 0
    assert "Added:      0" in out
    assert "Duplicates: 3" in out


def test_sync_unknown_source_is_config_error(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(capsys, "sync", "--config", str(project), "--source", "atlantis")

    assert code == 3
    assert "atlantis" in err


def test_missing_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(capsys, "status", "--config", str(tmp_path / "absent.json"))

    assert code == 3
    assert "failed reading config file" in err


def test_connection_test_command(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "test", "--config", str(project), "--source", "kyoto-list")
    assert code == 0
    assert "Kyoto List: connection OK" in out

    code, out, _ = _run(capsys, "test", "--config", str(project), "--source", "missing-map")
    assert code == 4
    assert "Missing Map: connection failed" in out


def test_status_reads_persisted_history(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)

    code, out, _ = _run(capsys, "status", "--config", str(project))

    assert code == 0
    paul_line = next(line for line in out.splitlines() if "Paul's Map" in line)
    assert "success" in paul_line
    assert "history: 1" in paul_line
    assert "Added 3 new places, 0 duplicates skipped" in paul_line
    missing_line = next(line for line in out.splitlines() if "Missing Map" in line)
    assert "idle" in missing_line
    assert "last sync: never" in missing_line
    assert "Places:     5" in out


def test_status_clear_history(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)

    code, out, _ = _run(capsys, "status", "--config", str(project), "--source", "pauls-map", "--clear")
    assert code == 0
    assert "Cleared sync history for Paul's Map" in out

    _, out, _ = _run(capsys, "status", "--config", str(project), "--source", "pauls-map")
    assert "history: 0" in out


def test_places_list_filters(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)

    _, out, _ = _run(capsys, "places", "list", "--config", str(project), "--city", "kyoto")
    assert "kinkakuji" in out
    assert "nishiki-market" in out
    assert "shibuya-station" not in out
    assert "2 places" in out

    _, out, _ = _run(capsys, "places", "list", "--config", str(project), "--source", "pauls-map", "--search", "hachiko")
    assert "shibuya-station" in out
    assert "1 place" in out


def test_places_list_near_orders_by_distance(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)

    code, out, _ = _run(
        capsys, "places", "list", "--config", str(project), "--near", "35.6580,139.7016", "--radius", "1"
    )

    assert code == 0
    lines = [line for line in out.splitlines() if " km" in line]
    assert [line.split()[0] for line in lines] == ["shibuya-station", "ichiran-ramen"]
    assert "0.00 km" in lines[0]


def test_places_add_and_reject_duplicate(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)
    add = ("places", "add", "--config", str(project), "--name", "Sensoji Temple", "--category", "entertainment")

    code, out, _ = _run(capsys, *add, "--city", "Tokyo", "--lat", "35.7148", "--lon", "139.7967")
    assert code == 0
    assert "Added Sensoji Temple" in out

    code, _, err = _run(capsys, *add, "--city", "Tokyo")
    assert code == 2
    assert "already exists" in err

    _, out, _ = _run(capsys, "places", "list", "--config", str(project), "--source", "user")
    assert "sensoji-temple" in out


def test_places_add_requires_both_coordinates(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, _, err = _run(
        capsys,
        "places",
        "add",
        "--config",
        str(project),
        "--name",
        "Half Point",
        "--category",
        "shopping",
        "--city",
        "Tokyo",
        "--lat",
        "35.0",
    )

    assert code == 3
    assert "--lat and --lon" in err


def test_places_edit_rename_then_describe(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)

    code, out, _ = _run(
        capsys, "places", "edit", "shibuya-station", "--config", str(project), "--name", "Shibuya Crossing"
    )
    assert code == 0
    assert "Updated shibuya-station (version 1)" in out

    code, out, _ = _run(
        capsys, "places", "edit", "shibuya-crossing", "--config", str(project), "--description", "Scramble"
    )
    assert code == 0
    assert "(version 2)" in out

    _, out, _ = _run(capsys, "places", "list", "--config", str(project), "--search", "scramble")
    assert "shibuya-crossing" in out
    assert "Shibuya Crossing" in out


def test_places_edit_rejections(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)

    code, _, err = _run(capsys, "places", "edit", "shibuya-station", "--config", str(project), "--name", "Dotonbori")
    assert code == 2
    assert "cannot edit" in err

    code, _, _ = _run(capsys, "places", "edit", "atlantis", "--config", str(project), "--description", "x")
    assert code == 2

    code, _, err = _run(capsys, "places", "edit", "dotonbori", "--config", str(project))
    assert code == 3
    assert "nothing to edit" in err


def test_places_stats(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _sync_both(project, capsys)
    _run(capsys, "places", "edit", "dotonbori", "--config", str(project), "--description", "Neon")

    code, out, _ = _run(capsys, "places", "stats", "--config", str(project))

    assert code == 0
    assert "Places:     5" in out
    assert "Osaka=1" in out
    assert "Kyoto=2" in out
    assert "Edits:      1 (1 place edited)" in out


def test_edits_export_then_import_into_fresh_store(
    project: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _sync_both(project, capsys)
    _run(capsys, "places", "edit", "dotonbori", "--config", str(project), "--category", "restaurant")
    export_path = tmp_path / "exports" / "edits.json"

    code, out, _ = _run(capsys, "edits", "export", "--config", str(project), "--output", str(export_path))
    assert code == 0
    assert "Exported 1 edits" in out
    exported = json.loads(export_path.read_text(encoding="utf-8"))
    assert exported["userEdits"][0]["placeId"] == "dotonbori"
    assert exported["version"] == "1.0"

    other = json.loads(project.read_text(encoding="utf-8"))
    other["storage_dir"] = "other-store"
    other_config = tmp_path / "other.json"
    other_config.write_text(json.dumps(other), encoding="utf-8")

    code, out, _ = _run(capsys, "edits", "import", str(export_path), "--config", str(other_config))
    assert code == 0
    assert "Successfully imported 1 edits" in out

    code, out, _ = _run(capsys, "edits", "import", str(export_path), "--config", str(other_config))
    assert "Successfully imported 0 edits" in out


def test_edits_export_to_stdout(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code, out, _ = _run(capsys, "edits", "export", "--config", str(project))

    assert code == 0
    assert json.loads(out)["userEdits"] == []


def test_edits_import_rejects_non_export(project: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    bogus = tmp_path / "bogus.json"
    bogus.write_text('{"places": []}', encoding="utf-8")

    code, _, err = _run(capsys, "edits", "import", str(bogus), "--config", str(project))

    assert code == 3
    assert "Invalid edit export" in err


def test_parse_command_auto_detects_format(
    tmp_path: Path, sample_list_payload: str, capsys: pytest.CaptureFixture[str]
) -> None:
    feed = tmp_path / "list.txt"
    feed.write_text(sample_list_payload, encoding="utf-8")

    code, out, _ = _run(capsys, "parse", str(feed))

    assert code == 0
    assert "kinkakuji" in out
    assert "2 places parsed as maps_list" in out


def test_parse_command_rejects_malformed_feed(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    feed = tmp_path / "broken.kml"
    feed.write_text("<html>not a feed</html>", encoding="utf-8")

    code, _, err = _run(capsys, "parse", str(feed), "--format", "kml")

    assert code == 3
    assert "Invalid KML format" in err
