"""
Test suite for the command line driver
"""

import logging
import os

import pytest

from jscesk.cli import build_parser, main
from jscesk.errors import E_UNRESOLVED, SemanticError

from conftest import EXAMPLES_DIR


@pytest.fixture(autouse=True)
def restore_logging():
    """main() installs a root handler; drop it again after each test"""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
    logging.getLogger("jscesk").setLevel(logging.NOTSET)


class TestArguments:
    """Test argument parsing"""

    def test_flags(self):
        args = build_parser().parse_args(["-d", "--inverted-truthiness", "prog.js"])
        assert args.debug
        assert args.inverted_truthiness
        assert args.file == "prog.js"

    def test_file_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    """Test running files"""

    def test_runs_example(self, capsys):
        path = os.path.join(EXAMPLES_DIR, "ifib.js")
        assert main([path]) == 0
        captured = capsys.readouterr()
        assert captured.out == "34\n"
        assert f"runcesk {path}: " in captured.err
        assert captured.err.strip().endswith("ms")

    def test_fatal_error_propagates(self, tmp_path):
        prog = tmp_path / "bad.js"
        prog.write_text("let x = missing;", encoding="utf-8")
        with pytest.raises(SemanticError) as exc:
            main([str(prog)])
        assert exc.value.code == E_UNRESOLVED

    def test_env_override(self, tmp_path, capsys, monkeypatch):
        prog = tmp_path / "truthy.js"
        prog.write_text("if (0) { print('inverted'); } else { print('plain'); }", encoding="utf-8")
        monkeypatch.setenv("JSCESK_INVERTED_TRUTHINESS", "1")
        main([str(prog)])
        assert capsys.readouterr().out == "inverted\n"
