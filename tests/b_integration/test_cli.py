"""Integration tests for the clonesure command line."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from clonesure.cli import create_parser, main


class TestMain:
    """Tests for main()."""

    def test_expr(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-e", "|@s1| s1"]) == 0
        assert capsys.readouterr().out == "{\n  let s1 = s1.clone();\n  move || s1\n}\n"

    def test_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "closure.rs"
        path.write_text("move |@mut a, b| { a += b; a }\n")
        assert main([str(path), "--inline"]) == 0
        assert capsys.readouterr().out == (
            "{ let mut a = a.clone(); move |b| { a += b; a } }\n"
        )

    def test_stdin(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("|x| x"))
        assert main([]) == 0
        assert capsys.readouterr().out == "{\n  |x| x\n}\n"

    def test_syntax_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["-e", "|@a, @a| a"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "<expr>:1:6: error[DuplicateCapture]" in captured.err
        assert "|      ^^" in captured.err

    def test_config_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "clonesure.yaml"
        config.write_text("indent: 4\nqualified_clone: true\n")
        assert main(["--config", str(config), "-e", "|@a| a"]) == 0
        assert capsys.readouterr().out.splitlines()[1] == (
            "    let a = ::core::clone::Clone::clone(&a);"
        )

    def test_flags_override_config(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config = tmp_path / "clonesure.yaml"
        config.write_text("indent: 4\n")
        assert main(["--config", str(config), "--indent", "1", "-e", "|@a| a"]) == 0
        assert capsys.readouterr().out.splitlines()[1] == " let a = a.clone();"

    def test_bad_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "clonesure.yaml"
        config.write_text("indent: wide\n")
        assert main(["--config", str(config), "-e", "|a| a"]) == 2
        assert "Error loading configuration" in capsys.readouterr().err

    def test_missing_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([str(tmp_path / "nope.rs")]) == 2
        assert "cannot read" in capsys.readouterr().err


class TestCreateParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        args = create_parser().parse_args([])
        assert args.file is None
        assert args.expr is None
        assert args.indent is None
        assert not args.inline
        assert args.verbose == 0

    def test_file_and_expr_are_exclusive(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as excinfo:
            create_parser().parse_args(["closure.rs", "-e", "|a| a"])
        assert excinfo.value.code == 2
        assert "not allowed with" in capsys.readouterr().err

    def test_verbose_counts(self) -> None:
        args = create_parser().parse_args(["-vv", "-e", "|a| a"])
        assert args.verbose == 2
