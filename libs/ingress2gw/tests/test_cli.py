"""Tests for the ingress2gw CLI."""

import json
import subprocess
from pathlib import Path

import pytest
import yaml

from ingress2gw.cli import create_parser, main

TESTDATA = Path(__file__).parent / "testdata"


@pytest.fixture(autouse=True)
def no_kubeconfig(monkeypatch, tmp_path):
    """Keep the developer's kubeconfig out of the tests."""
    monkeypatch.setenv("KUBECONFIG", str(tmp_path / "missing-kubeconfig"))


@pytest.fixture
def input_file():
    return str(TESTDATA / "input-file.yaml")


class TestCreateParser:
    def test_defaults(self):
        args = create_parser().parse_args(["print"])

        assert args.command == "print"
        assert args.output == "yaml"
        assert args.input_file == ""
        assert args.namespace == ""
        assert args.all_namespaces is False
        assert args.kubectl == "kubectl"

    def test_input_file_alias(self):
        args = create_parser().parse_args(["print", "--input-file", "ing.yaml"])
        assert args.input_file == "ing.yaml"

    def test_namespace_flags_exclusive(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["print", "-n", "apps", "-A"])
        assert exc_info.value.code == 2
        assert "not allowed with argument" in capsys.readouterr().err


class TestMain:
    def test_print_yaml(self, input_file, capsys):
        assert main(["print", "--input_file", input_file, "-n", "namespace1"]) == 0

        docs = list(yaml.safe_load_all(capsys.readouterr().out))
        assert [d["kind"] for d in docs] == ["Gateway", "HTTPRoute"]
        assert docs[1]["metadata"]["name"] == "ingress1-all-hosts"

    def test_file_run_without_kubeconfig_uses_all_namespaces(self, input_file, capsys):
        assert main(["print", "--input_file", input_file]) == 0

        docs = list(yaml.safe_load_all(capsys.readouterr().out))
        assert len(docs) == 6

    def test_unsupported_format(self, input_file, capsys):
        assert main(["print", "--input_file", input_file, "-o", "xml"]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error: failed to initialize resource printer: xml is not a supported output format" in captured.err

    def test_no_resources(self, capsys):
        assert main(["print", "--input_file", str(TESTDATA / "no-ingress.yaml")]) == 1
        assert "No resources found" in capsys.readouterr().err

    def test_cluster_run_without_kubeconfig(self, capsys):
        assert main(["print"]) == 1
        assert "failed to initialize namespace filter" in capsys.readouterr().err

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage: ingress2gw" in capsys.readouterr().out

    def test_context_selects_namespace(self, monkeypatch, tmp_path, capsys):
        kubeconfig = tmp_path / "config"
        kubeconfig.write_text(yaml.safe_dump({
            "current-context": "dev",
            "contexts": [
                {"name": "dev", "context": {"cluster": "dev", "namespace": "team-a"}},
                {"name": "prod", "context": {"cluster": "prod", "namespace": "team-b"}},
            ],
        }))
        monkeypatch.setenv("KUBECONFIG", str(kubeconfig))

        calls = []

        def fake_run(cmd, capture_output, text, check):
            calls.append(cmd)
            items = [{
                "kind": "Ingress",
                "metadata": {"name": "web", "namespace": "team-b"},
                "spec": {
                    "ingressClassName": "nginx",
                    "rules": [{"http": {"paths": [{
                        "path": "/",
                        "pathType": "Prefix",
                        "backend": {"service": {"name": "web", "port": {"number": 80}}},
                    }]}}],
                },
            }]
            return subprocess.CompletedProcess(cmd, 0, stdout=json.dumps({"kind": "List", "items": items}), stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)

        assert main(["print", "--context", "prod"]) == 0
        assert calls[0][-4:] == ["--context", "prod", "--namespace", "team-b"]

        docs = list(yaml.safe_load_all(capsys.readouterr().out))
        assert {d["metadata"]["namespace"] for d in docs} == {"team-b"}
