"""Unit tests for TextFixerGateway."""

from pathlib import Path

import pytest

from ruby_structure_linter.domain.entities import Edit
from ruby_structure_linter.domain.syntax import Span
from ruby_structure_linter.infrastructure.gateways.text_fixer_gateway import TextFixerGateway


def test_applies_edits_and_backs_up(tmp_path: Path) -> None:
    target = tmp_path / "a.rb"
    target.write_text("return unless ready\n")
    changed = TextFixerGateway().apply_edits(
        str(target), [Edit(Span(7, 13), "if"), Edit(Span(14, 19), "!ready")]
    )
    assert changed
    assert target.read_text() == "return if !ready\n"
    assert (tmp_path / "a.rb.bak").read_text() == "return unless ready\n"


def test_no_backup(tmp_path: Path) -> None:
    target = tmp_path / "a.rb"
    target.write_text("Time.zone.today\n")
    TextFixerGateway().apply_edits(str(target), [Edit(Span(0, 15), "Date.current")], create_backup=False)
    assert target.read_text() == "Date.current\n"
    assert not (tmp_path / "a.rb.bak").exists()


def test_unchanged_content_is_not_written(tmp_path: Path) -> None:
    target = tmp_path / "a.rb"
    target.write_text("x = 1\n")
    assert not TextFixerGateway().apply_edits(str(target), [Edit(Span(0, 1), "x")])
    assert not (tmp_path / "a.rb.bak").exists()


def test_overlapping_edits_leave_file_untouched(tmp_path: Path) -> None:
    target = tmp_path / "a.rb"
    target.write_text("abcdef\n")
    with pytest.raises(ValueError):
        TextFixerGateway().apply_edits(str(target), [Edit(Span(0, 3), "x"), Edit(Span(1, 2), "y")])
    assert target.read_text() == "abcdef\n"
