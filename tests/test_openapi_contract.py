import json
from pathlib import Path

from brewstock.main import app


def test_openapi_paths_snapshot():
    snapshot_path = Path(__file__).parent / "snapshots" / "openapi_paths_snapshot.json"
    expected_paths = json.loads(snapshot_path.read_text(encoding="utf-8"))
    actual_paths = sorted(app.openapi()["paths"].keys())
    assert actual_paths == expected_paths


def test_csv_exports_document_text_csv():
    paths = app.openapi()["paths"]
    for path in ("/alerts/export", "/analysis/export", "/transactions/export"):
        assert "text/csv" in paths[path]["get"]["responses"]["200"]["content"]
