"""
Unit tests for the setup orchestrator.
"""
from unittest.mock import MagicMock

import pytest
from snowdrop.MANAGERS.setup_orchestrator import SetupOrchestrator, resolve_application_name
from snowdrop.MODELS.application import Application
from snowdrop.errors import ProvisioningError


class TestResolveApplicationName:
    """Name priority: flag, then MANIFEST, then directory name."""

    def test_flag_wins(self, tmp_path):
        app = Application(name="from-manifest")
        assert resolve_application_name("from-flag", app, str(tmp_path)) == "from-flag"

    def test_manifest_before_directory(self, tmp_path):
        app = Application(name="from-manifest")
        assert resolve_application_name(None, app, str(tmp_path)) == "from-manifest"

    def test_directory_fallback(self, tmp_path):
        project = tmp_path / "spring-boot"
        project.mkdir()
        assert resolve_application_name("", Application(), str(project)) == "spring-boot"

    def test_directory_with_trailing_slash(self, tmp_path):
        project = tmp_path / "spring-boot"
        project.mkdir()
        assert resolve_application_name(None, Application(), str(project) + "/") == "spring-boot"


@pytest.fixture
def resolver():
    resolver = MagicMock()
    resolver.current_namespace.side_effect = lambda explicit=None: explicit or "context-ns"
    return resolver


@pytest.fixture
def provisioner():
    provisioner = MagicMock()
    provisioner.find_labeled_deployment_configs.return_value = []
    return provisioner


def make_orchestrator(tmp_path, resolver, provisioner, **kwargs):
    return SetupOrchestrator(
        cwd=str(tmp_path),
        resolver_factory=lambda kube_config: resolver,
        provisioner_factory=lambda core_v1, dynamic: provisioner,
        **kwargs
    )


class TestSetupOrchestrator:
    """Tests for SetupOrchestrator."""

    def test_provision_path_order(self, tmp_path, resolver, provisioner):
        """Without an existing DeploymentConfig everything is provisioned in order."""
        tool = make_orchestrator(tmp_path, resolver, provisioner).setup()

        assert tool.application.name == tmp_path.name
        assert tool.application.namespace == "context-ns"
        calls = [c[0] for c in provisioner.method_calls]
        assert calls == [
            "find_labeled_deployment_configs",
            "create_default_image_streams",
            "create_pvc",
            "create_or_retrieve_deployment_config",
            "create_service",
            "create_route",
        ]
        provisioner.create_pvc.assert_called_once_with(tool.application, "1Gi")
        dc = provisioner.create_or_retrieve_deployment_config.return_value
        provisioner.create_service.assert_called_once_with(tool.application, dc)

    def test_reuse_path(self, tmp_path, resolver, provisioner):
        """An existing labeled DeploymentConfig names the application and nothing is created."""
        provisioner.find_labeled_deployment_configs.return_value = ["existing-app", "other"]

        tool = make_orchestrator(tmp_path, resolver, provisioner, app_name="ignored").setup()

        assert tool.application.name == "existing-app"
        provisioner.find_labeled_deployment_configs.assert_called_once_with(
            "io.openshift.odo", "inject-supervisord", "context-ns"
        )
        provisioner.create_default_image_streams.assert_not_called()
        provisioner.create_pvc.assert_not_called()
        provisioner.create_route.assert_not_called()

    def test_manifest_name_and_namespace(self, tmp_path, resolver, provisioner):
        (tmp_path / "MANIFEST").write_text("name: from-manifest\nnamespace: manifest-ns\n")

        tool = make_orchestrator(tmp_path, resolver, provisioner).setup()

        assert tool.application.name == "from-manifest"
        assert tool.application.namespace == "manifest-ns"

    def test_flags_override_manifest(self, tmp_path, resolver, provisioner):
        (tmp_path / "MANIFEST").write_text("name: from-manifest\nnamespace: manifest-ns\n")

        tool = make_orchestrator(tmp_path, resolver, provisioner, app_name="flag-app", namespace="flag-ns").setup()

        assert tool.application.name == "flag-app"
        assert tool.application.namespace == "flag-ns"

    def test_failure_aborts_setup(self, tmp_path, resolver, provisioner):
        """A failing step stops the sequence."""
        provisioner.create_pvc.side_effect = ProvisioningError("boom")

        with pytest.raises(ProvisioningError):
            make_orchestrator(tmp_path, resolver, provisioner).setup()
        provisioner.create_or_retrieve_deployment_config.assert_not_called()
        provisioner.create_route.assert_not_called()

    def test_setup_and_wait_for_pod(self, tmp_path, resolver, provisioner, monkeypatch):
        pod = MagicMock()
        waited = {}

        def fake_wait(core_v1, app):
            waited["app"] = app
            return pod

        monkeypatch.setattr("snowdrop.MANAGERS.setup_orchestrator.wait_and_get_pod", fake_wait)

        tool, result = make_orchestrator(tmp_path, resolver, provisioner).setup_and_wait_for_pod()

        assert result is pod
        assert waited["app"] is tool.application

    def test_clean_uses_existing_name(self, tmp_path, resolver, provisioner):
        provisioner.find_labeled_deployment_configs.return_value = ["existing-app"]
        provisioner.delete_all.return_value = ["Route/existing-app"]

        tool, deleted = make_orchestrator(tmp_path, resolver, provisioner).clean()

        assert tool.application.name == "existing-app"
        assert deleted == ["Route/existing-app"]
        provisioner.delete_all.assert_called_once_with(tool.application)

    def test_unusable_manifest_images_fail_before_provisioning(self, tmp_path, resolver, provisioner):
        """A MANIFEST without a supervisord image creates nothing."""
        (tmp_path / "MANIFEST").write_text(
            "images:\n"
            "  - name: dev-s2i\n"
            "    repo: quay.io/snowdrop/spring-boot-s2i\n"
        )

        with pytest.raises(ProvisioningError, match="supervisord"):
            make_orchestrator(tmp_path, resolver, provisioner).setup()
        provisioner.create_default_image_streams.assert_not_called()
        provisioner.create_pvc.assert_not_called()

    def test_default_images_filled_in(self, tmp_path, resolver, provisioner):
        tool = make_orchestrator(tmp_path, resolver, provisioner).setup()
        assert [image.name for image in tool.application.images] == ["copy-supervisord", "dev-s2i"]
