from pathlib import Path

import pandas as pd
import pytest
import requests

from stationflow.utils import read_text, write_frame


class _FakeResponse:
    def __init__(self, status_code: int, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


def _patch_get(monkeypatch: pytest.MonkeyPatch, statuses: list) -> list:
    calls = []

    def _fake_get(url, timeout):
        calls.append((url, timeout))
        status = statuses[min(len(calls), len(statuses)) - 1]
        return _FakeResponse(status, text="short_name\nA\n")

    monkeypatch.setattr(requests, "get", _fake_get)
    return calls


def test_read_text_retries_until_success(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _patch_get(monkeypatch, [503, 503, 200])
    body = read_text("https://example.org/stations.csv", request_timeout=5.0, max_retries=3)
    assert body == "short_name\nA\n"
    assert len(calls) == 3
    assert calls[0] == ("https://example.org/stations.csv", 5.0)


def test_read_text_raises_after_exhausting_retries(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = _patch_get(monkeypatch, [503])
    with pytest.raises(requests.HTTPError):
        read_text("https://example.org/stations.csv", max_retries=2)
    assert len(calls) == 3


def test_read_text_local_file(tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")
    assert read_text(path) == "hello"
    with pytest.raises(FileNotFoundError):
        read_text(tmp_path / "missing.txt")


def test_write_frame_parquet_and_csv(tmp_path: Path) -> None:
    frame = pd.DataFrame({"short_name": ["A", "B"], "total_traffic": [3, 1]})
    parquet_path = tmp_path / "out" / "traffic.parquet"
    write_frame(frame, parquet_path)
    pd.testing.assert_frame_equal(pd.read_parquet(parquet_path), frame)

    csv_path = tmp_path / "out" / "traffic.csv"
    write_frame(frame, csv_path)
    pd.testing.assert_frame_equal(pd.read_csv(csv_path), frame)


def test_write_frame_rejects_unknown_suffix(tmp_path: Path) -> None:
    frame = pd.DataFrame({"short_name": ["A"]})
    with pytest.raises(ValueError):
        write_frame(frame, tmp_path / "traffic.txt")
    assert not (tmp_path / "traffic.txt").exists()
