# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Orchestration of the development environment setup.

Setup either reuses an existing development DeploymentConfig or provisions
everything in a fixed order: ImageStreams, PVC, DeploymentConfig, Service, Route.
Any failure aborts the whole setup.
"""
import logging
import os
from typing import Any, Callable, List, Optional, Tuple

from ..CLUSTER.config_resolver import ClusterConfigResolver, resolve_kube_config
from ..MODELS.application import Application, ODO_LABEL_NAME, ODO_LABEL_VALUE, default_images
from ..MODELS.tool import KubeConfig, Tool
from ..PARSERS.manifest_parser import ManifestParser, current_manifest_path
from ..errors import ProvisioningError
from .pod_watcher import wait_and_get_pod
from .resource_provisioner import ResourceProvisioner

logger = logging.getLogger(__name__)

PVC_SIZE = "1Gi"


def resolve_images(app: Application) -> None:
    """
    Fills in the default images and checks a supervisord and a runtime image are present.

    :raises ProvisioningError: If the MANIFEST images cannot make up a development pod.
    """
    if not app.images:
        app.images = default_images()
    if app.supervisord_image() is None or app.runtime_image() is None:
        raise ProvisioningError(
            "MANIFEST images must include a supervisord image (annotationCmds: true) and a runtime image"
        )


def resolve_application_name(explicit: Optional[str], app: Application, cwd: str) -> str:
    """
    Picks the application name: explicit flag, else MANIFEST value, else the directory name.

    :param explicit: Name given on the command line.
    :param app: Application parsed from the MANIFEST.
    :param cwd: The project directory.
    :return: The application name.
    """
    if explicit:
        logger.info("Using explicit application name '%s'", explicit)
        return explicit
    if app.name:
        logger.info("Using application name '%s' that was set in MANIFEST", app.name)
        return app.name
    directory_name = os.path.basename(os.path.normpath(cwd))
    logger.info("Using (default) application name '%s' which is the name of the project's directory", directory_name)
    return directory_name


class SetupOrchestrator:
    """
    Sequences manifest parsing, cluster configuration and resource provisioning.
    """

    def __init__(
        self,
        kubeconfig: Optional[str] = None,
        master_url: Optional[str] = None,
        namespace: Optional[str] = None,
        app_name: Optional[str] = None,
        cwd: Optional[str] = None,
        manifest_parser: Optional[ManifestParser] = None,
        resolver_factory: Callable[[KubeConfig], Any] = ClusterConfigResolver,
        provisioner_factory: Callable[[Any, Any], ResourceProvisioner] = ResourceProvisioner,
    ):
        """
        Initializes the orchestrator from the command line options.

        :param kubeconfig: Path to the kubeconfig, defaults to ~/.kube/config.
        :param master_url: API server address overriding the kubeconfig one.
        :param namespace: Namespace to work in.
        :param app_name: Application name.
        :param cwd: Project directory holding the MANIFEST, defaults to the current directory.
        :param manifest_parser: Parser for the MANIFEST.
        :param resolver_factory: Builds the cluster config resolver from a KubeConfig.
        :param provisioner_factory: Builds the provisioner from the core and dynamic clients.
        """
        self.kubeconfig = kubeconfig
        self.master_url = master_url
        self.namespace = namespace
        self.app_name = app_name
        self.cwd = cwd or os.getcwd()
        self.manifest_parser = manifest_parser or ManifestParser()
        self.resolver_factory = resolver_factory
        self.provisioner_factory = provisioner_factory

    def setup(self) -> Tool:
        """
        Resolves the configuration and makes sure the development environment exists.

        :return: The application and the clients bound to the cluster.
        """
        tool, provisioner = self._prepare()
        self.finish_setup_and_set_application_name(tool.application, provisioner)
        return tool

    def setup_and_wait_for_pod(self) -> Tuple[Tool, Any]:
        """
        Runs setup then blocks until the development pod is ready.

        :return: The setup result and the ready pod.
        """
        tool = self.setup()
        logger.info("Wait till the dev pod is available")
        pod = wait_and_get_pod(tool.core_v1, tool.application)
        return tool, pod

    def clean(self) -> Tuple[Tool, List[str]]:
        """
        Deletes the resources of the development environment.

        :return: The setup context and the resources deleted.
        """
        tool, provisioner = self._prepare()
        app = tool.application
        existing = provisioner.find_labeled_deployment_configs(ODO_LABEL_NAME, ODO_LABEL_VALUE, app.namespace)
        if existing and not self.app_name:
            app.name = existing[0]
        else:
            app.name = resolve_application_name(self.app_name, app, self.cwd)
        return tool, provisioner.delete_all(app)

    def finish_setup_and_set_application_name(self, app: Application, provisioner: ResourceProvisioner) -> None:
        """
        Reuses the labeled DeploymentConfig if there is one, otherwise provisions the environment.
        """
        existing = provisioner.find_labeled_deployment_configs(ODO_LABEL_NAME, ODO_LABEL_VALUE, app.namespace)
        if existing:
            app.name = existing[0]
            logger.info(
                "Using application name '%s' from the existing DeploymentConfig labeled with '%s=%s'",
                app.name, ODO_LABEL_NAME, ODO_LABEL_VALUE,
            )
            return

        logger.info("Setting up the development pod")
        app.name = resolve_application_name(self.app_name, app, self.cwd)
        resolve_images(app)

        logger.info("Create ImageStreams for Supervisord and Java S2I Image of SpringBoot")
        provisioner.create_default_image_streams(app)

        logger.info("Create PVC to store m2 repo")
        provisioner.create_pvc(app, PVC_SIZE)

        logger.info("Create or retrieve DeploymentConfig using Supervisord and Java S2I Image of SpringBoot")
        dc = provisioner.create_or_retrieve_deployment_config(app)

        logger.info("Create Service using Template")
        provisioner.create_service(app, dc)

        logger.info("Create Route using Template")
        provisioner.create_route(app)

    def _prepare(self) -> Tuple[Tool, ResourceProvisioner]:
        logger.info("Parse MANIFEST of the project if it exists")
        app = self.manifest_parser.parse(current_manifest_path(self.cwd))

        logger.info("Get K8s config file")
        kube_config = resolve_kube_config(self.kubeconfig, self.master_url)
        resolver = self.resolver_factory(kube_config)

        app.namespace = resolver.current_namespace(self.namespace or app.namespace or None)
        logger.info("Using '%s' namespace", app.namespace)

        tool = Tool(
            application=app,
            kube_config=kube_config,
            rest_config=resolver.rest_config(),
            core_v1=resolver.core_v1(),
            dynamic=resolver.dynamic(),
        )
        return tool, self.provisioner_factory(tool.core_v1, tool.dynamic)
