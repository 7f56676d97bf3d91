import json
from pathlib import Path

import pytest

from catalogpress.cli.main import main
from tests.helpers._feed_builders import ABSTORE_XML_FEED, csv_feed_bytes


def _write_feed(tmp_path: Path, name: str = "feed.csv", content: bytes | None = None) -> Path:
    path = tmp_path / name
    path.write_bytes(csv_feed_bytes() if content is None else content)
    return path


def test_summary_command_prints_json(tmp_path: Path, capsys) -> None:
    feed = _write_feed(tmp_path)

    assert main(["summary", str(feed)]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["filename"] == "feed.csv"
    assert payload["total_products"] == 3
    assert payload["colors"] == ["biały", "szary"]


def test_products_command_honours_format_override(tmp_path: Path, capsys) -> None:
    feed = _write_feed(tmp_path, name="export.dat", content=ABSTORE_XML_FEED)

    assert main(["products", str(feed), "--format", "abstore"]) == 0

    (product,) = json.loads(capsys.readouterr().out)
    assert product["ean"] == "5909990000015"
    assert product["price"] == "35.50"


def test_generate_command_writes_pdf(tmp_path: Path, capsys, offline_images) -> None:
    feed = _write_feed(tmp_path)
    out = tmp_path / "katalog.pdf"

    assert main(["generate", str(feed), "--out", str(out), "--min-price", "100"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["products"] == 1
    assert report["pages"] == 2
    assert out.read_bytes().startswith(b"%PDF")


def test_verbose_progress_goes_to_stderr(tmp_path: Path, capsys, offline_images) -> None:
    feed = _write_feed(tmp_path)
    out = tmp_path / "katalog.pdf"

    assert main(["-v", "generate", str(feed), "--out", str(out)]) == 0

    captured = capsys.readouterr()
    assert json.loads(captured.out)["pages"] == 3
    assert "[1/3] Title page" in captured.err


def test_cli_errors_exit_with_status_2(tmp_path: Path, capsys) -> None:
    feed = _write_feed(tmp_path, name="feed.json", content=b"{}")

    with pytest.raises(SystemExit) as excinfo:
        main(["summary", str(feed)])

    assert excinfo.value.code == 2
    assert "Unsupported feed format" in capsys.readouterr().err


def test_missing_file_exits_with_status_2(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["summary", str(tmp_path / "missing.csv")])

    assert excinfo.value.code == 2
