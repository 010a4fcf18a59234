"""Tests for the command line interface."""

import importlib
import io
import logging
from contextlib import contextmanager

import pytest
import uvicorn
import yaml
from fastapi import FastAPI

import nlcompute.api.app as app_module
from nlcompute import cli
from nlcompute.configuration.generator import DocumentGenerator
from nlcompute.logging_config import setup_logging
from nlcompute.shared.schemas import ParameterSet


def _scripted_input(*lines):
    remaining = list(lines)

    def read(prompt):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return read


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.mark.integration
class TestChat:
    def test_chat_to_completion(self, workflow, tmp_path, capsys):
        output = tmp_path / "deployment.yaml"
        read = _scripted_input(
            "Jupyter notebook with an A100",
            "",
            "8 cores, 16GB RAM, 100GB storage for 2 days",
        )

        exit_code = cli.run_chat(workflow, output=output, input_fn=read)

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "QUESTION:" in out
        assert "(Please provide an answer)" in out
        assert "GENERATED YAML" in out
        config = yaml.safe_load(output.read_text())
        assert config["profiles"]["duration"] == "2d"

    def test_quit_before_describing(self, workflow, capsys):
        assert cli.run_chat(workflow, input_fn=_scripted_input("quit")) == 0
        assert "Goodbye!" in capsys.readouterr().out
        assert len(workflow.store) == 0

    def test_end_of_input_mid_conversation(self, workflow, capsys):
        exit_code = cli.run_chat(workflow, input_fn=_scripted_input("4 cores"))

        assert exit_code == 1
        assert "Exiting without generating a document." in capsys.readouterr().out


@pytest.mark.integration
class TestValidate:
    def test_valid_file(self, tmp_path, capsys):
        path = tmp_path / "ok.yaml"
        path.write_text(DocumentGenerator().render(ParameterSet()))

        assert cli.main(["validate", str(path)]) == 0
        assert "is valid" in capsys.readouterr().out

    def test_invalid_file(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("version: '2.0'\n")

        assert cli.main(["validate", str(path)]) == 1
        assert 'Version must be "1.0"' in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        assert cli.run_validate(tmp_path / "absent.yaml") == 1


@pytest.mark.unit
def test_parser_requires_command():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


@pytest.mark.unit
def test_chat_with_missing_existing_file(tmp_path, capsys):
    assert cli.main(["chat", "--existing", str(tmp_path / "absent.yaml")]) == 1
    assert "File not found" in capsys.readouterr().out


@contextmanager
def restored_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    try:
        yield root
    finally:
        for handler in list(root.handlers):
            if handler not in handlers:
                handler.close()
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)


@pytest.fixture
def uvicorn_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


@pytest.mark.integration
class TestServe:
    def test_serve_runs_api(self, uvicorn_calls, monkeypatch):
        monkeypatch.delenv("NLCOMPUTE_LLM_ENABLED", raising=False)

        assert cli.main(["serve", "--host", "127.0.0.1", "--port", "9000"]) == 0

        app, kwargs = uvicorn_calls[0]
        assert isinstance(app, FastAPI)
        assert kwargs == {"host": "127.0.0.1", "port": 9000}
        assert app.state.workflow is not None

    def test_importing_app_keeps_debug_logging(self, monkeypatch):
        monkeypatch.delenv("NLCOMPUTE_DEBUG", raising=False)
        monkeypatch.delenv("NLCOMPUTE_LLM_ENABLED", raising=False)

        with restored_root_logger() as root:
            setup_logging(debug=True, stream=io.StringIO())
            importlib.reload(app_module)
            level = root.level

        assert level == logging.DEBUG
