"""
Waiting for the development pod of an application to become ready.
"""
import logging
from typing import Any, Optional

from kubernetes import watch
from kubernetes.client.rest import ApiException
from tenacity import retry, retry_if_exception_type, retry_if_result, wait_fixed
from urllib3.exceptions import ProtocolError, ReadTimeoutError

from ..MODELS.application import Application
from ..errors import ProvisioningError

logger = logging.getLogger(__name__)

# The API server closes a watch after this many seconds; it is then reopened.
WATCH_TIMEOUT_SECONDS = 60


def is_pod_ready(pod: Any) -> bool:
    """
    A pod is ready once it is running and all its containers report ready.
    """
    status = pod.status
    if status is None or status.phase != "Running":
        return False
    container_statuses = status.container_statuses or []
    return bool(container_statuses) and all(cs.ready for cs in container_statuses)


# Reopened when the server closes the watch or the connection drops
@retry(
    retry=retry_if_result(lambda pod: pod is None) | retry_if_exception_type((ProtocolError, ReadTimeoutError)),
    wait=wait_fixed(1),
)
def _watch_for_ready_pod(core_v1: Any, app: Application) -> Optional[Any]:
    w = watch.Watch()
    try:
        for event in w.stream(
            core_v1.list_namespaced_pod,
            namespace=app.namespace,
            label_selector=f"app={app.name}",
            timeout_seconds=WATCH_TIMEOUT_SECONDS,
        ):
            pod = event["object"]
            logger.debug("Pod %s: %s", event["type"], pod.metadata.name)
            if event["type"] != "DELETED" and is_pod_ready(pod):
                return pod
    except ApiException as e:
        raise ProvisioningError(f"Pod watch error: {e.reason}") from e
    finally:
        w.stop()
    return None


def wait_and_get_pod(core_v1: Any, app: Application) -> Any:
    """
    Blocks until a ready pod labeled app=<name> exists and returns it.

    There is no timeout: the watch is reopened each time the server closes it
    or the connection to the API server drops.

    :param core_v1: CoreV1Api client.
    :param app: The application whose pod to wait for.
    :return: The ready pod.
    """
    logger.info("Waiting for pod of '%s' in namespace '%s'", app.name, app.namespace)
    pod = _watch_for_ready_pod(core_v1, app)
    logger.info("Pod '%s' is ready", pod.metadata.name)
    return pod
