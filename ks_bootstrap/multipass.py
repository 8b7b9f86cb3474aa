"""Launch Multipass VMs for cluster nodes that do not exist yet."""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
import time
from pathlib import Path

from ks_common.api import BootstrapEngineError, HostSpec
from ks_provisioner.api import ClusterNode, MachineSpec

logger = logging.getLogger(__name__)


class MultipassLauncher:
    """Create Multipass VMs and return nodes with SSH connection details."""

    def __init__(self, state_dir: Path, ssh_user: str = "ubuntu", ip_attempts: int = 15):
        self.state_dir = state_dir
        self.ssh_user = ssh_user
        self.ip_attempts = ip_attempts

    def launch(self, node: ClusterNode) -> ClusterNode:
        """Launch the VM described by ``node`` and return a materialized copy."""
        if not shutil.which("multipass"):
            raise BootstrapEngineError("Multipass CLI not found in PATH")
        if node.machine is None:
            raise BootstrapEngineError(
                f"Node {node.name} has neither connection details nor VM sizing",
                context={"node": node.name},
            )

        self.state_dir.mkdir(parents=True, exist_ok=True)
        key_path = self.state_dir / f"{node.name}_id_rsa"
        pub_path = self.state_dir / f"{node.name}_id_rsa.pub"
        self._generate_ephemeral_keys(key_path, pub_path)
        self._launch_vm(node.name, node.machine)
        ip = self._get_ip_address(node.name)
        self._inject_ssh_key(node.name, pub_path)

        return node.with_host(
            HostSpec(
                name=node.name,
                address=ip,
                user=self.ssh_user,
                private_key=key_path.absolute(),
            )
        )

    def _generate_ephemeral_keys(self, key_path: Path, pub_path: Path) -> None:
        """Generate a fresh SSH key pair, replacing a stale one."""
        for path in (key_path, pub_path):
            if path.exists():
                path.unlink()
        try:
            subprocess.run(
                ["ssh-keygen", "-t", "rsa", "-b", "4096", "-f", str(key_path), "-N", ""],
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
            key_path.chmod(0o600)
        except subprocess.CalledProcessError as exc:
            raise BootstrapEngineError(
                f"Failed to generate SSH key: {exc.stderr.decode()}", cause=exc
            ) from exc

    def _launch_vm(self, vm_name: str, machine: MachineSpec) -> None:
        """Launch a Multipass VM, retrying once with the LTS image."""
        cmd = [
            "multipass",
            "launch",
            machine.image,
            "--name",
            vm_name,
            "--cpus",
            str(machine.cpus),
            "--disk",
            machine.disk,
            "--memory",
            machine.memory,
        ]
        logger.info("Launching Multipass VM %s (%s)", vm_name, machine.image)
        try:
            subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
        except subprocess.CalledProcessError:
            fallback = cmd[:]
            fallback[2] = "lts"
            logger.warning("Launch of %s with image %s failed; retrying with lts", vm_name, machine.image)
            try:
                subprocess.run(
                    fallback, check=True, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE
                )
            except subprocess.CalledProcessError as exc:
                raise BootstrapEngineError(
                    f"Failed to launch VM {vm_name}: {exc.stderr.decode().strip()}",
                    context={"node": vm_name},
                    cause=exc,
                ) from exc

    def _get_ip_address(self, vm_name: str) -> str:
        """Return the IPv4 address for the VM, waiting until assigned."""
        for _ in range(self.ip_attempts):
            try:
                result = subprocess.run(
                    ["multipass", "info", vm_name, "--format", "json"],
                    capture_output=True,
                    text=True,
                    check=True,
                )
                info = json.loads(result.stdout)
            except (subprocess.CalledProcessError, json.JSONDecodeError):
                time.sleep(2)
                continue
            ipv4_list = info.get("info", {}).get(vm_name, {}).get("ipv4", [])
            if ipv4_list:
                return ipv4_list[0]
            time.sleep(2)
        raise BootstrapEngineError(
            f"Timed out waiting for IP of {vm_name}", context={"node": vm_name}
        )

    def _inject_ssh_key(self, vm_name: str, pub_path: Path) -> None:
        """Authorize the generated key inside the VM."""
        if not pub_path.exists():
            raise BootstrapEngineError("Public key not found for SSH injection")

        content = pub_path.read_text().strip()
        script = (
            "mkdir -p ~/.ssh && "
            f"echo '{content}' >> ~/.ssh/authorized_keys && "
            "chmod 600 ~/.ssh/authorized_keys && "
            "chmod 700 ~/.ssh"
        )
        try:
            subprocess.run(
                ["multipass", "exec", vm_name, "--", "bash", "-c", script],
                check=True,
                stderr=subprocess.PIPE,
            )
        except subprocess.CalledProcessError as exc:
            raise BootstrapEngineError(
                f"Failed to inject SSH key for {vm_name}: {exc.stderr.decode()}",
                context={"node": vm_name},
                cause=exc,
            ) from exc
