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
Resolution of the developer's kubeconfig into API clients.
"""
import logging
from typing import Optional

from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException
from openshift.dynamic import DynamicClient

from ..MODELS.tool import KubeConfig, home_kube_path
from ..errors import ClusterConfigError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


def resolve_kube_config(path: Optional[str] = None, master_url: Optional[str] = None) -> KubeConfig:
    """
    Picks the kubeconfig file to use.

    :param path: Explicit kubeconfig path, if any.
    :param master_url: Address of the API server overriding the one in the kubeconfig.
    :return: The kube configuration.
    """
    kube_config = KubeConfig(config=path or home_kube_path(), master_url=master_url or None)
    logger.debug("Kubeconfig : %s", kube_config)
    return kube_config


class ClusterConfigResolver:
    """
    Builds the REST configuration and the API clients from a kubeconfig.

    Clients are built on first use and cached afterwards.
    """

    def __init__(self, kube_config: KubeConfig):
        """
        :param kube_config: Location of the credentials and optional master URL override.
        """
        self.kube_config = kube_config
        self._rest_config: Optional[client.Configuration] = None
        self._api_client: Optional[client.ApiClient] = None
        self._dynamic: Optional[DynamicClient] = None

    def rest_config(self) -> client.Configuration:
        """
        Loads the kubeconfig into a client configuration.

        :raises ClusterConfigError: If the file is missing or invalid.
        """
        if self._rest_config is None:
            logger.info("Create k8s Rest config client using the developer's machine config file")
            configuration = client.Configuration()
            try:
                config.load_kube_config(
                    config_file=self.kube_config.config,
                    client_configuration=configuration,
                )
            except (ConfigException, OSError) as e:
                raise ClusterConfigError(f"Error building kubeconfig: {e}") from e
            if self.kube_config.master_url:
                configuration.host = self.kube_config.master_url
            self._rest_config = configuration
        return self._rest_config

    def api_client(self) -> client.ApiClient:
        if self._api_client is None:
            logger.info("Create k8s Clientset")
            self._api_client = client.ApiClient(configuration=self.rest_config())
        return self._api_client

    def core_v1(self) -> client.CoreV1Api:
        return client.CoreV1Api(self.api_client())

    def dynamic(self) -> DynamicClient:
        """
        OpenShift dynamic client, used for ImageStreams, DeploymentConfigs and Routes.

        Creating it runs API discovery against the cluster.
        """
        if self._dynamic is None:
            try:
                self._dynamic = DynamicClient(self.api_client())
            except Exception as e:
                raise ClusterConfigError(f"Error building OpenShift client: {e}") from e
        return self._dynamic

    def current_namespace(self, explicit: Optional[str] = None) -> str:
        """
        Returns the namespace to work in.

        :param explicit: Namespace requested by the user, wins when set.
        :return: The explicit namespace, else the one of the active kubeconfig context, else 'default'.
        """
        if explicit:
            return explicit
        try:
            _, active = config.list_kube_config_contexts(config_file=self.kube_config.config)
        except (ConfigException, OSError) as e:
            raise ClusterConfigError(f"Error reading kubeconfig contexts: {e}") from e
        context = (active or {}).get("context") or {}
        return context.get("namespace") or DEFAULT_NAMESPACE
