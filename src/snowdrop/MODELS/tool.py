"""
Models for the cluster access configuration and the state produced by setup.
"""
import os
from dataclasses import dataclass
from typing import Any, Optional
from pydantic import BaseModel

from .application import Application


def home_kube_path() -> str:
    """
    Returns the default kubeconfig location, ~/.kube/config.
    """
    return os.path.join(os.path.expanduser("~"), ".kube", "config")


class KubeConfig(BaseModel):
    """
    Where to read the cluster credentials from.
    """
    config: str
    master_url: Optional[str] = None


@dataclass
class Tool:
    """Everything a command needs once setup is done."""

    application: Application
    kube_config: KubeConfig
    rest_config: Any = None
    core_v1: Any = None
    dynamic: Any = None
