"""Tests for clipboard copying."""

import subprocess

import pytest

from kit_market import clipboard
from kit_market.clipboard import copy_text, find_clipboard_command


def test_no_tool_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(clipboard.shutil, "which", lambda name: None)

    assert find_clipboard_command() is None
    assert copy_text("hello") is False


def test_copy_pipes_text_to_tool(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs["input"]))
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

    monkeypatch.setattr(clipboard.sys, "platform", "linux")
    monkeypatch.setattr(clipboard.shutil, "which", lambda name: "/usr/bin/xclip" if name == "xclip" else None)
    monkeypatch.setattr(clipboard.subprocess, "run", fake_run)

    assert copy_text("/plugin install x") is True
    assert calls == [(["xclip", "-selection", "clipboard"], "/plugin install x")]


def test_tool_failure_returns_false(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(clipboard.sys, "platform", "darwin")
    monkeypatch.setattr(clipboard.shutil, "which", lambda name: "/usr/bin/pbcopy" if name == "pbcopy" else None)
    monkeypatch.setattr(
        clipboard.subprocess,
        "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(args=cmd, returncode=1, stdout="", stderr="no display"),
    )

    assert copy_text("x") is False


def test_tool_crash_returns_false(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, **kwargs):
        raise OSError("exec failed")

    monkeypatch.setattr(clipboard.sys, "platform", "darwin")
    monkeypatch.setattr(clipboard.shutil, "which", lambda name: "/usr/bin/pbcopy" if name == "pbcopy" else None)
    monkeypatch.setattr(clipboard.subprocess, "run", fake_run)

    assert copy_text("x") is False
