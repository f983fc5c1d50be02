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
Creation, lookup and removal of the development environment's cluster resources.

Every create is preceded by an existence check, so provisioning twice is a no-op.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from kubernetes import client
from kubernetes.client.rest import ApiException
from openshift.dynamic.exceptions import DynamicApiError, NotFoundError, ResourceNotFoundError

from ..MODELS.application import Application, Image, M2_DATA_CLAIM, default_images
from ..TEMPLATES.renderer import TemplateRenderer
from ..errors import ProvisioningError

logger = logging.getLogger(__name__)

IMAGESTREAM_API = ("image.openshift.io/v1", "ImageStream")
DEPLOYMENTCONFIG_API = ("apps.openshift.io/v1", "DeploymentConfig")
ROUTE_API = ("route.openshift.io/v1", "Route")


class ResourceProvisioner:
    """
    Provisions ImageStreams, the m2 PVC, the DeploymentConfig, the Service and the Route.

    Core resources go through the typed CoreV1Api, OpenShift ones through the dynamic client.
    """

    def __init__(self, core_v1: client.CoreV1Api, dynamic: Any, renderer: Optional[TemplateRenderer] = None):
        """
        :param core_v1: Client for PVCs and Services.
        :param dynamic: OpenShift dynamic client for ImageStreams, DeploymentConfigs and Routes.
        :param renderer: Template renderer, a default one is created when omitted.
        """
        self.core_v1 = core_v1
        self.dynamic = dynamic
        self.renderer = renderer or TemplateRenderer()

    # ImageStreams

    def create_default_image_streams(self, app: Application) -> None:
        """
        Creates the ImageStreams of the application's images, falling back to
        the supervisord and Java S2I images when the MANIFEST lists none.
        """
        if not app.images:
            app.images = default_images()
        self.create_image_streams(app, app.images)

    def create_image_streams(self, app: Application, images: List[Image]) -> None:
        api = self._openshift_api(*IMAGESTREAM_API)
        for image in images:
            if self._exists(api, image.name, app.namespace):
                logger.info("'%s' ImageStream already exists, skipping", image.name)
                continue
            body = self.renderer.render_resource("imagestream", app, image=image)
            self._create(api, body, app.namespace)
            logger.info("Created ImageStream '%s' from %s", image.name, image.repo)

    # PersistentVolumeClaim

    def create_pvc(self, app: Application, size: str = "1Gi") -> None:
        """
        Creates the claim storing the maven repository.

        :param app: The application.
        :param size: Requested storage.
        """
        if self._core_exists(self.core_v1.read_namespaced_persistent_volume_claim, M2_DATA_CLAIM, app.namespace):
            logger.info("'%s' PVC already exists, skipping", M2_DATA_CLAIM)
            return

        pvc = client.V1PersistentVolumeClaim(
            api_version="v1",
            kind="PersistentVolumeClaim",
            metadata=client.V1ObjectMeta(name=M2_DATA_CLAIM, labels={"app": app.name}),
            spec=client.V1PersistentVolumeClaimSpec(
                access_modes=["ReadWriteOnce"],
                resources=client.V1ResourceRequirements(requests={"storage": size}),
            ),
        )
        try:
            self.core_v1.create_namespaced_persistent_volume_claim(namespace=app.namespace, body=pvc)
        except ApiException as e:
            raise ProvisioningError(f"Unable to create PersistentVolumeClaim: {e.reason}") from e
        logger.info("Created PVC '%s' of %s", M2_DATA_CLAIM, size)

    # DeploymentConfig

    def create_or_retrieve_deployment_config(self, app: Application) -> Any:
        """
        Returns the application's DeploymentConfig, creating it first if needed.

        :param app: The application, with its images resolved.
        :return: The DeploymentConfig as returned by the cluster.
        """
        api = self._openshift_api(*DEPLOYMENTCONFIG_API)
        existing = self._get(api, app.name, app.namespace)
        if existing is not None:
            logger.info("'%s' DeploymentConfig already exists, reusing it", app.name)
            return existing

        supervisord = app.supervisord_image()
        runtime = app.runtime_image()
        if supervisord is None or runtime is None:
            raise ProvisioningError(
                "A supervisord image and a runtime image are required to create the DeploymentConfig"
            )

        body = self.renderer.render_resource("deploymentconfig", app, supervisord=supervisord, runtime=runtime)
        dc = self._create(api, body, app.namespace)
        logger.info("Created DeploymentConfig '%s'", app.name)
        return dc

    def find_labeled_deployment_configs(self, label: str, value: str, namespace: str) -> List[str]:
        """
        Returns the names of the DeploymentConfigs carrying label=value.
        """
        api = self._openshift_api(*DEPLOYMENTCONFIG_API)
        try:
            result = api.get(namespace=namespace, label_selector=f"{label}={value}")
        except DynamicApiError as e:
            raise ProvisioningError(
                f"Error retrieving DeploymentConfig labeled {label}={value}. Are you logged in?"
            ) from e
        return [item.metadata.name for item in result.items]

    # Service and Route

    def create_service(self, app: Application, dc: Any) -> None:
        """
        Creates the Service in front of the DeploymentConfig's pods.

        :param app: The application.
        :param dc: The DeploymentConfig, whose selector the Service reuses.
        """
        if self._core_exists(self.core_v1.read_namespaced_service, app.name, app.namespace):
            logger.info("'%s' Service already exists, skipping", app.name)
            return

        selector = _as_dict(dc).get("spec", {}).get("selector") or {"app": app.name}
        body = self.renderer.render_resource("service", app, selector=selector)
        try:
            self.core_v1.create_namespaced_service(namespace=app.namespace, body=body)
        except ApiException as e:
            raise ProvisioningError(f"Unable to create Service: {e.reason}") from e
        logger.info("Created Service '%s'", app.name)

    def create_route(self, app: Application) -> None:
        api = self._openshift_api(*ROUTE_API)
        if self._exists(api, app.name, app.namespace):
            logger.info("'%s' Route already exists, skipping", app.name)
            return
        body = self.renderer.render_resource("route", app)
        self._create(api, body, app.namespace)
        logger.info("Created Route '%s'", app.name)

    # Removal

    def delete_all(self, app: Application) -> List[str]:
        """
        Deletes every resource provisioned for the application. Missing ones are ignored.

        :param app: The application.
        :return: Descriptions of the resources actually deleted.
        """
        deleted = []
        for kind_api, name in [(ROUTE_API, app.name), (DEPLOYMENTCONFIG_API, app.name)]:
            if self._delete(self._openshift_api(*kind_api), name, app.namespace):
                deleted.append(f"{kind_api[1]}/{name}")

        if self._core_delete(self.core_v1.delete_namespaced_service, app.name, app.namespace):
            deleted.append(f"Service/{app.name}")
        if self._core_delete(self.core_v1.delete_namespaced_persistent_volume_claim, M2_DATA_CLAIM, app.namespace):
            deleted.append(f"PersistentVolumeClaim/{M2_DATA_CLAIM}")

        api = self._openshift_api(*IMAGESTREAM_API)
        for image in app.images or default_images():
            if self._delete(api, image.name, app.namespace):
                deleted.append(f"ImageStream/{image.name}")

        for item in deleted:
            logger.info("Deleted %s", item)
        return deleted

    # Helpers

    def _openshift_api(self, api_version: str, kind: str) -> Any:
        try:
            return self.dynamic.resources.get(api_version=api_version, kind=kind)
        except ResourceNotFoundError as e:
            raise ProvisioningError(
                f"The cluster does not serve {kind} ({api_version}). Is it an OpenShift cluster?"
            ) from e

    def _get(self, api: Any, name: str, namespace: str) -> Any:
        try:
            return api.get(name=name, namespace=namespace)
        except NotFoundError:
            return None
        except DynamicApiError as e:
            raise ProvisioningError(f"Unable to look up {api.kind} '{name}': {e.reason}") from e

    def _exists(self, api: Any, name: str, namespace: str) -> bool:
        return self._get(api, name, namespace) is not None

    def _create(self, api: Any, body: Dict[str, Any], namespace: str) -> Any:
        try:
            return api.create(body=body, namespace=namespace)
        except DynamicApiError as e:
            raise ProvisioningError(f"Unable to create {body['kind']}: {e.reason}") from e

    def _delete(self, api: Any, name: str, namespace: str) -> bool:
        try:
            api.delete(name=name, namespace=namespace)
        except NotFoundError:
            return False
        except DynamicApiError as e:
            raise ProvisioningError(f"Unable to delete {api.kind} '{name}': {e.reason}") from e
        return True

    @staticmethod
    def _core_exists(read: Callable[..., Any], name: str, namespace: str) -> bool:
        try:
            read(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                return False
            raise ProvisioningError(f"Unable to look up '{name}': {e.reason}") from e
        return True

    @staticmethod
    def _core_delete(delete: Callable[..., Any], name: str, namespace: str) -> bool:
        try:
            delete(name=name, namespace=namespace)
        except ApiException as e:
            if e.status == 404:
                return False
            raise ProvisioningError(f"Unable to delete '{name}': {e.reason}") from e
        return True


def _as_dict(resource: Any) -> Dict[str, Any]:
    if isinstance(resource, dict):
        return resource
    return resource.to_dict()
