"""
memdb Demo Driver Tests
=======================
Runs the sample-customer walkthrough and the command-line entry point.
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from memdb import IndexKind


class TestDemo:

    def test_build_engine(self):
        engine = main.build_engine()
        assert len(engine) == len(main.SAMPLE_CUSTOMERS)
        assert engine.list_indexes() == []

    def test_run_demo_final_state(self):
        lines = []
        engine = main.run_demo(lines.append)

        assert engine.select_unique("id", 55).name == "abc"
        assert engine.select_unique("id", 42).name == "cba"
        assert [c.name for c in engine.select_many("age", 333)] == ["David", "Emma", "Frank"]
        assert len(engine) == 20
        assert (IndexKind.UNIQUE, "id") in engine.list_indexes()

        text = "\n".join(lines)
        assert "unique index on age: DuplicateKeyError" in text
        assert "unique index on name: DuplicateKeyError" in text
        assert "index on 'missing': InvalidFieldError" in text
        assert "delete index on 'aaa': IndexNotFoundError" in text
        assert "second unique index on id: IndexAlreadyExistsError" in text
        assert "unique id=99: KeyNotFoundError" in text
        assert "unique id=3: #3 Charlie (30)" in text


class TestEntryPoint:

    def test_quiet(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", "--quiet"])
        main.main()
        assert capsys.readouterr().out == ""

    def test_default_prints(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py"])
        main.main()
        assert "Loaded 20 customers" in capsys.readouterr().out

    def test_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", "--help"])
        main.main()
        assert "Usage:" in capsys.readouterr().out

    def test_unknown_option(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", "--bogus"])
        with pytest.raises(SystemExit) as exc:
            main.main()
        assert exc.value.code == 1
        assert "--bogus" in capsys.readouterr().err
