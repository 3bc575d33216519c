from __future__ import annotations

import json

from grinfi_common import errors, tooling
from grinfi_common.telemetry import REDACT_TOKEN, TELEMETRY_FILE, log_event, redact


def _records(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_redact_secrets_and_contact_details():
    out = redact(
        {
            "authorization": "Bearer abc",
            "api_key": "k",
            "args": {"email": "ann@acme.io", "uuid": "u1", "items": [{"linkedin": "ann"}]},
        }
    )
    assert out["authorization"] == "Bearer " + REDACT_TOKEN
    assert out["api_key"] == REDACT_TOKEN
    assert out["args"]["email"] == REDACT_TOKEN
    assert out["args"]["uuid"] == "u1"
    assert out["args"]["items"][0]["linkedin"] == REDACT_TOKEN


def test_log_event_writes_jsonl(monkeypatch, tmp_path):
    monkeypatch.setenv("GRINFI_DISABLE_TELEMETRY", "0")
    monkeypatch.setenv("GRINFI_TELEMETRY_DIR", str(tmp_path))

    log_event("tool", "send_email", {"args": {"to_email": "x@y.z"}}, ok=True, ms=12, client_id="c", corr_id="r1")

    (rec,) = _records(tmp_path / TELEMETRY_FILE)
    assert rec["name"] == "send_email"
    assert rec["corr_id"] == "r1"
    assert rec["ms"] == 12
    assert rec["args"]["args"]["to_email"] == REDACT_TOKEN
    assert rec["ts"].endswith("Z")


def test_log_event_disabled(monkeypatch, tmp_path):
    monkeypatch.setenv("GRINFI_DISABLE_TELEMETRY", "true")
    monkeypatch.setenv("GRINFI_TELEMETRY_DIR", str(tmp_path))

    log_event("tool", "list_tags")

    assert not (tmp_path / TELEMETRY_FILE).exists()


def test_log_event_unwritable_dir_is_not_fatal(monkeypatch, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    monkeypatch.setenv("GRINFI_DISABLE_TELEMETRY", "0")
    monkeypatch.setenv("GRINFI_TELEMETRY_DIR", str(blocker / "sub"))

    log_event("tool", "list_tags")


def test_redaction_marker_is_shared():
    assert REDACT_TOKEN == "***redacted***"
    assert tooling.REDACT_TOKEN is REDACT_TOKEN
    assert not hasattr(errors, "REDACT_TOKEN")
    assert tooling.sanitize_args_for_log({"token": "t"}) == {"token": REDACT_TOKEN}
