"""Shell snippets executed on cluster hosts during bootstrap."""

from __future__ import annotations

import shlex
from typing import Iterable

from ks_provisioner.api import ClusterNode

API_SERVER_PORT = 6443
ADMIN_KUBECONFIG = "/etc/kubernetes/admin.conf"

PRINT_JOIN_COMMAND = "kubeadm token create --print-join-command"
UPLOAD_CERTS = "kubeadm init phase upload-certs --upload-certs"
READ_ADMIN_CONF = f"cat {ADMIN_KUBECONFIG}"


def prepare_node(kubernetes_version: str) -> str:
    """Install containerd and the kubeadm toolchain on a Debian/Ubuntu host."""
    repo = f"https://pkgs.k8s.io/core:/stable:/{kubernetes_version}/deb/"
    keyring = "/etc/apt/keyrings/kubernetes-apt-keyring.gpg"
    return "\n".join(
        [
            "set -e",
            "export DEBIAN_FRONTEND=noninteractive",
            "swapoff -a",
            "sed -i '/ swap / s/^/#/' /etc/fstab",
            "modprobe overlay",
            "modprobe br_netfilter",
            "cat > /etc/sysctl.d/99-kubernetes.conf <<'EOF'",
            "net.bridge.bridge-nf-call-iptables = 1",
            "net.bridge.bridge-nf-call-ip6tables = 1",
            "net.ipv4.ip_forward = 1",
            "EOF",
            "sysctl --system >/dev/null",
            "apt-get update",
            "apt-get install -y apt-transport-https ca-certificates curl gpg containerd",
            "mkdir -p /etc/containerd",
            "containerd config default | sed 's/SystemdCgroup = false/SystemdCgroup = true/' "
            "> /etc/containerd/config.toml",
            "systemctl restart containerd",
            "mkdir -p /etc/apt/keyrings",
            f"curl -fsSL {repo}Release.key | gpg --dearmor --yes -o {keyring}",
            f"echo 'deb [signed-by={keyring}] {repo} /' > /etc/apt/sources.list.d/kubernetes.list",
            "apt-get update",
            "apt-get install -y kubelet kubeadm kubectl",
            "apt-mark hold kubelet kubeadm kubectl",
        ]
    )


def haproxy_config(masters: Iterable[ClusterNode]) -> str:
    """Render a TCP load-balancer config fronting the API servers."""
    lines = [
        "global",
        "    log /dev/log local0",
        "defaults",
        "    mode tcp",
        "    timeout connect 10s",
        "    timeout client 1m",
        "    timeout server 1m",
        "frontend kubernetes-api",
        f"    bind *:{API_SERVER_PORT}",
        "    default_backend kubernetes-masters",
        "backend kubernetes-masters",
        "    balance roundrobin",
        "    option tcp-check",
    ]
    for master in masters:
        lines.append(
            f"    server {master.name} {master.address}:{API_SERVER_PORT} check fall 3 rise 2"
        )
    return "\n".join(lines) + "\n"


def configure_haproxy(masters: Iterable[ClusterNode]) -> str:
    return "\n".join(
        [
            "set -e",
            "export DEBIAN_FRONTEND=noninteractive",
            "apt-get update",
            "apt-get install -y haproxy",
            "cat > /etc/haproxy/haproxy.cfg <<'EOF'",
            haproxy_config(masters).rstrip("\n"),
            "EOF",
            "systemctl enable haproxy",
            "systemctl restart haproxy",
        ]
    )


def kubeadm_init(endpoint: str, pod_cidr: str = "", service_cidr: str = "") -> str:
    parts = [
        "kubeadm",
        "init",
        "--control-plane-endpoint",
        f"{endpoint}:{API_SERVER_PORT}",
        "--upload-certs",
    ]
    if pod_cidr:
        parts.extend(["--pod-network-cidr", pod_cidr])
    if service_cidr:
        parts.extend(["--service-cidr", service_cidr])
    return " ".join(shlex.quote(part) for part in parts)


def apply_manifest(manifest: str) -> str:
    return " ".join(
        shlex.quote(part)
        for part in ["kubectl", "--kubeconfig", ADMIN_KUBECONFIG, "apply", "-f", manifest]
    )


def control_plane_join(join_command: str, certificate_key: str) -> str:
    return f"{join_command} --control-plane --certificate-key {shlex.quote(certificate_key)}"
