"""Tests for the Chromium export adapter."""

from __future__ import annotations

import os
import stat
import subprocess
from pathlib import Path

import pytest

from docbinder.errors import ExportFailureError, ExportUnavailableError, WriteError
from docbinder.export import ChromiumExporter, PageSetup, inject_page_setup, write_artifact

HTML = "<!DOCTYPE html><html><head><title>t</title></head><body><p>hi</p></body></html>"


def _fake_browser(recorded: list[list[str]], payload: bytes = b"%PDF-1.7 fake"):  # type: ignore[no-untyped-def]
    def fake_run(args, check, capture_output, text, errors, timeout):  # type: ignore[no-untyped-def]
        recorded.append(list(args))
        for arg in args:
            if arg.startswith("--print-to-pdf="):
                Path(arg.split("=", 1)[1]).write_bytes(payload)

        class _Completed:
            returncode = 0
            stdout = ""
            stderr = ""

        return _Completed()

    return fake_run


def _executable(tmp_path: Path) -> str:
    browser = tmp_path / "chromium"
    browser.write_text("#!/bin/sh\n", encoding="utf-8")
    return str(browser)


def test_export_invokes_headless_browser(monkeypatch, tmp_path: Path) -> None:
    recorded: list[list[str]] = []
    monkeypatch.setattr("docbinder.export.subprocess.run", _fake_browser(recorded))

    exporter = ChromiumExporter(executable=_executable(tmp_path), timeout=30)
    data = exporter.export(HTML)

    assert data == b"%PDF-1.7 fake"
    args = recorded[0]
    assert args[0] == str(tmp_path / "chromium")
    assert "--headless" in args
    assert "--no-pdf-header-footer" in args
    assert any(arg.startswith("--print-to-pdf=") for arg in args)
    assert args[-1].startswith("file://")


def test_session_releases_workspace_on_success_and_failure(monkeypatch, tmp_path: Path) -> None:
    recorded: list[list[str]] = []
    monkeypatch.setattr("docbinder.export.subprocess.run", _fake_browser(recorded))
    exporter = ChromiumExporter(executable=_executable(tmp_path))

    with exporter.session() as session:
        session.export(HTML)
        workdir = session.workdir
        staged = (workdir / "page.html").read_text(encoding="utf-8")
    assert not workdir.exists()
    assert "@page" in staged

    with pytest.raises(RuntimeError):
        with exporter.session() as session:
            failing_dir = session.workdir
            raise RuntimeError("boom")
    assert not failing_dir.exists()


def test_export_timeout_raises_failure(monkeypatch, tmp_path: Path) -> None:
    def fake_run(args, check, capture_output, text, errors, timeout):  # type: ignore[no-untyped-def]
        raise subprocess.TimeoutExpired(cmd=args, timeout=timeout)

    monkeypatch.setattr("docbinder.export.subprocess.run", fake_run)
    exporter = ChromiumExporter(executable=_executable(tmp_path), timeout=5)

    with pytest.raises(ExportFailureError) as excinfo:
        exporter.export(HTML)

    assert "timed out" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, subprocess.TimeoutExpired)


def test_export_nonzero_exit_raises_failure(monkeypatch, tmp_path: Path) -> None:
    def fake_run(args, check, capture_output, text, errors, timeout):  # type: ignore[no-untyped-def]
        raise subprocess.CalledProcessError(1, args, output="", stderr="renderer crashed")

    monkeypatch.setattr("docbinder.export.subprocess.run", fake_run)
    exporter = ChromiumExporter(executable=_executable(tmp_path))

    with pytest.raises(ExportFailureError) as excinfo:
        exporter.export(HTML)

    assert "renderer crashed" in str(excinfo.value)


def test_export_without_pdf_output_raises_failure(monkeypatch, tmp_path: Path) -> None:
    recorded: list[list[str]] = []
    monkeypatch.setattr("docbinder.export.subprocess.run", _fake_browser(recorded, payload=b""))
    exporter = ChromiumExporter(executable=_executable(tmp_path))

    with pytest.raises(ExportFailureError):
        exporter.export(HTML)


def test_export_launch_failure_raises_unavailable(monkeypatch, tmp_path: Path) -> None:
    def fake_run(args, check, capture_output, text, errors, timeout):  # type: ignore[no-untyped-def]
        raise PermissionError("not executable")

    monkeypatch.setattr("docbinder.export.subprocess.run", fake_run)
    exporter = ChromiumExporter(executable=_executable(tmp_path))

    with pytest.raises(ExportUnavailableError):
        exporter.export(HTML)


def test_missing_browser_raises_unavailable(monkeypatch) -> None:
    monkeypatch.setattr("docbinder.export.shutil.which", lambda name: None)

    with pytest.raises(ExportUnavailableError):
        ChromiumExporter().resolve_executable()
    with pytest.raises(ExportUnavailableError):
        ChromiumExporter(executable="no-such-browser").resolve_executable()


def test_resolve_executable_searches_path(monkeypatch) -> None:
    found = {"google-chrome": "/opt/google/chrome"}
    monkeypatch.setattr("docbinder.export.shutil.which", lambda name: found.get(name))

    assert ChromiumExporter().resolve_executable() == "/opt/google/chrome"


def test_page_setup_stylesheet_defaults_to_a4() -> None:
    css = PageSetup().stylesheet()

    assert "size: 8.27in 11.7in;" in css
    assert "margin: 0.4in 0.4in 0.4in 0.4in;" in css
    assert "print-color-adjust: exact" in css
    assert "zoom" not in css


def test_page_setup_landscape_and_scale() -> None:
    css = PageSetup(landscape=True, scale=0.8, print_background=False).stylesheet()

    assert "size: 11.7in 8.27in;" in css
    assert "zoom: 0.8" in css
    assert "print-color-adjust" not in css


def test_inject_page_setup_places_style_in_head() -> None:
    injected = inject_page_setup(HTML, PageSetup())

    head, body = injected.split("</head>", 1)
    assert "@page" in head
    assert "@page" not in body


def test_write_artifact_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "out" / "doc.pdf"
    target.parent.mkdir()
    target.write_bytes(b"old")

    result = write_artifact(target, b"new")

    assert result == target
    assert target.read_bytes() == b"new"
    assert sorted(p.name for p in target.parent.iterdir()) == ["doc.pdf"]


def test_write_artifact_failure_raises_write_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(WriteError) as excinfo:
        write_artifact(blocker / "doc.pdf", b"data")

    assert excinfo.value.path == blocker / "doc.pdf"


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_write_artifact_keeps_existing_permissions(tmp_path: Path) -> None:
    target = tmp_path / "doc.pdf"
    target.write_bytes(b"old")
    os.chmod(target, 0o644)

    write_artifact(target, b"new")

    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_write_artifact_new_file_follows_umask(tmp_path: Path) -> None:
    previous = os.umask(0o022)
    try:
        target = write_artifact(tmp_path / "fresh.pdf", b"data")
    finally:
        os.umask(previous)

    assert stat.S_IMODE(target.stat().st_mode) == 0o644


def test_undecodable_browser_output_still_maps_to_export_failure(
    monkeypatch, tmp_path: Path
) -> None:
    seen: dict[str, object] = {}

    def fake_run(args, check, capture_output, text, errors, timeout):  # type: ignore[no-untyped-def]
        seen["errors"] = errors
        stderr = b"bad byte \xff".decode("utf-8", errors=errors)
        raise subprocess.CalledProcessError(1, args, output="", stderr=stderr)

    monkeypatch.setattr("docbinder.export.subprocess.run", fake_run)

    with pytest.raises(ExportFailureError) as excinfo:
        ChromiumExporter(executable=_executable(tmp_path)).export(HTML)

    assert seen["errors"] == "replace"
    assert "bad byte" in str(excinfo.value)
