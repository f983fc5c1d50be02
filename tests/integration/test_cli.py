"""
Integration tests for the sd command line, with the orchestrator's cluster side mocked.
"""
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner
from snowdrop.CLI.main import cli
from snowdrop.MODELS.application import Application
from snowdrop.MODELS.tool import KubeConfig, Tool
from snowdrop.errors import ClusterConfigError


@pytest.fixture
def orchestrator(monkeypatch):
    orchestrator = MagicMock()
    created = {}

    def factory(**kwargs):
        created.update(kwargs)
        return orchestrator

    monkeypatch.setattr("snowdrop.CLI.main.SetupOrchestrator", factory)
    orchestrator.options = created
    return orchestrator


def make_tool(name="demo", namespace="dev"):
    return Tool(application=Application(name=name, namespace=namespace), kube_config=KubeConfig(config="/tmp/config"))


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'scaffold a Spring Boot application' in result.output
    assert '--kubeconfig' in result.output
    assert '--application' in result.output


def test_cli_init(orchestrator):
    orchestrator.setup.return_value = make_tool()
    runner = CliRunner()
    result = runner.invoke(cli, ['-n', 'dev', '-a', 'demo', '-k', '/tmp/config', '--masterurl', 'https://m:8443', 'init'])

    assert result.exit_code == 0
    assert "Application 'demo' is ready in namespace 'dev'." in result.output
    assert orchestrator.options == {
        'kubeconfig': '/tmp/config',
        'master_url': 'https://m:8443',
        'namespace': 'dev',
        'app_name': 'demo',
    }


def test_cli_options_from_environment(orchestrator):
    orchestrator.setup.return_value = make_tool()
    runner = CliRunner()
    result = runner.invoke(cli, ['init'], env={'SD_NAMESPACE': 'env-ns', 'SD_APPLICATION': 'env-app'})

    assert result.exit_code == 0
    assert orchestrator.options['namespace'] == 'env-ns'
    assert orchestrator.options['app_name'] == 'env-app'


def test_cli_error_exits_with_1(orchestrator):
    orchestrator.setup.side_effect = ClusterConfigError("Error building kubeconfig: no configuration found")
    runner = CliRunner()
    result = runner.invoke(cli, ['init'])

    assert result.exit_code == 1
    assert 'Error building kubeconfig' in result.output


def test_cli_pod(orchestrator):
    dev_pod = MagicMock()
    dev_pod.metadata.name = 'demo-1-abcde'
    orchestrator.setup_and_wait_for_pod.return_value = (make_tool(), dev_pod)
    runner = CliRunner()
    result = runner.invoke(cli, ['pod'])

    assert result.exit_code == 0
    assert 'demo-1-abcde' in result.output


def test_cli_clean(orchestrator):
    orchestrator.clean.return_value = (make_tool(), ['Route/demo', 'Service/demo'])
    runner = CliRunner()
    result = runner.invoke(cli, ['clean'])

    assert result.exit_code == 0
    assert 'Deleted Route/demo' in result.output
    assert 'Deleted Service/demo' in result.output


def test_cli_clean_nothing(orchestrator):
    orchestrator.clean.return_value = (make_tool(), [])
    runner = CliRunner()
    result = runner.invoke(cli, ['clean'])

    assert result.exit_code == 0
    assert "Nothing to delete for 'demo'." in result.output
