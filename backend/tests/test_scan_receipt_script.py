from __future__ import annotations

import importlib.util
import json
import subprocess
import sys
from pathlib import Path

import httpx
import pytest

from receipt_fixtures import completion_for, make_service, make_settings

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "scan_receipt.py"


@pytest.fixture(scope="module")
def scan_receipt():
    spec = importlib.util.spec_from_file_location("scan_receipt", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def receipt_file(tmp_path):
    path = tmp_path / "receipt.jpg"
    path.write_bytes(bytes(range(256)) * 2)
    return path


def test_prints_result_as_json(scan_receipt, receipt_file, scenario_a, capsys):
    service, transport = make_service(completion_for(scenario_a))

    code = scan_receipt.main([str(receipt_file), "--json"], service=service)

    assert code == 0
    out = json.loads(capsys.readouterr().out)
    assert out["amount"] == 500
    assert out["category"] == "fuel"
    assert out["needsReview"] is False
    assert len(transport.requests) == 1


def test_prints_text_summary(scan_receipt, receipt_file, scenario_a, capsys):
    service, _ = make_service(completion_for(scenario_a))

    assert scan_receipt.main([str(receipt_file)], service=service) == 0

    out = capsys.readouterr().out
    assert "amount:      500.00" in out
    assert "confidence:  100%" in out
    assert "review:      not needed" in out


def test_unconfigured_service_exits_with_2(scan_receipt, receipt_file, capsys):
    service, _ = make_service(completion_for({}), config=make_settings(OPENAI_API_KEY=None))

    assert scan_receipt.main([str(receipt_file)], service=service) == 2
    assert "not configured" in capsys.readouterr().err


def test_processing_failure_exits_with_1(scan_receipt, receipt_file, capsys):
    service, _ = make_service(lambda request: httpx.Response(503, json={"error": {"message": "down"}}))

    assert scan_receipt.main([str(receipt_file)], service=service) == 1
    assert "Failed to process receipt" in capsys.readouterr().err


def test_tiny_image_is_rejected(scan_receipt, tmp_path, capsys):
    path = tmp_path / "tiny.jpg"
    path.write_bytes(b"\xff\xd8")
    service, transport = make_service(completion_for({}))

    assert scan_receipt.main([str(path)], service=service) == 1
    assert "Invalid image format" in capsys.readouterr().err
    assert transport.requests == []


def test_missing_file_script_run(tmp_path):
    # Run the script with current interpreter to check the plain-script entry point.
    result = subprocess.run(
        [sys.executable, str(SCRIPT), str(tmp_path / "missing.jpg")],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 1
    assert "Image not found" in result.stderr
