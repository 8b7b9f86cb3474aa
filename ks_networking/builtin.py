"""Built-in networking plugin catalog."""

from __future__ import annotations

from .interface import NetworkingPlugin

FLANNEL = NetworkingPlugin(
    name="flannel",
    manifest="https://github.com/flannel-io/flannel/releases/latest/download/kube-flannel.yml",
    default_pod_cidr="10.244.0.0/16",
    description="VXLAN overlay network from flannel-io",
)

CALICO = NetworkingPlugin(
    name="calico",
    manifest="https://raw.githubusercontent.com/projectcalico/calico/v3.27.3/manifests/calico.yaml",
    default_pod_cidr="192.168.0.0/16",
    description="BGP-capable networking with network policy support",
)

CANAL = NetworkingPlugin(
    name="canal",
    manifest="https://raw.githubusercontent.com/projectcalico/calico/v3.27.3/manifests/canal.yaml",
    default_pod_cidr="10.244.0.0/16",
    description="Flannel networking with Calico network policy",
)

WEAVE_NET = NetworkingPlugin(
    name="weave-net",
    manifest="https://github.com/weaveworks/weave/releases/download/v2.8.1/weave-daemonset-k8s.yaml",
    description="Weave Net mesh overlay",
)

KUBE_ROUTER = NetworkingPlugin(
    name="kube-router",
    manifest="https://raw.githubusercontent.com/cloudnativelabs/kube-router/master/daemonset/kubeadm-kuberouter.yaml",
    description="Routed pod networking using BGP",
)

BUILTIN_PLUGINS = (FLANNEL, CALICO, CANAL, WEAVE_NET, KUBE_ROUTER)
DEFAULT_PLUGIN = FLANNEL
