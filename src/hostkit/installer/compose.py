"""Containerized services deployed with docker compose"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from hostkit.errors import CommandError, ToolingMissing
from hostkit.privilege.executor import PrivilegedExecutor

logger = logging.getLogger(__name__)

DEFAULT_COMPOSE_ROOT = Path("/opt")


@dataclass
class ComposeService:
    """A single-file compose deployment"""

    name: str
    compose: Dict[str, Any]
    # data directory -> owner ("uid:gid") or None to keep root
    data_dirs: Dict[str, Optional[str]] = field(default_factory=dict)
    ready_message: str = ""


N8N = ComposeService(
    name="n8n",
    compose={
        "services": {
            "n8n": {
                "image": "n8nio/n8n:latest",
                "restart": "unless-stopped",
                "ports": ["5678:5678"],
                "environment": [
                    "N8N_HOST=localhost",
                    "N8N_PROTOCOL=http",
                    "N8N_PORT=5678",
                ],
                "volumes": ["./n8n_data:/home/node/.n8n"],
            }
        }
    },
    data_dirs={"n8n_data": "1000:1000"},
    ready_message="n8n is starting on port 5678",
)

WAZUH = ComposeService(
    name="wazuh",
    compose={
        "services": {
            "wazuh-manager": {
                "image": "wazuh/wazuh-manager:latest",
                "restart": "unless-stopped",
                "ports": ["1514:1514/udp", "1515:1515", "55000:55000"],
                "volumes": ["./wazuh_data:/var/ossec/data"],
            }
        }
    },
    ready_message=(
        "Wazuh manager is starting. API will be on 55000 when ready. "
        "Dashboard is not included in this minimal setup."
    ),
)

SERVICES = {service.name: service for service in (N8N, WAZUH)}


def render_compose(service: ComposeService) -> str:
    """Compose file text for ``service``"""
    return yaml.safe_dump(service.compose, default_flow_style=False, sort_keys=False)


def deploy_service(
    executor: PrivilegedExecutor,
    service: ComposeService,
    root: Path = DEFAULT_COMPOSE_ROOT,
) -> str:
    """Write the compose file, start the stack and return a ``docker ps`` summary"""
    base = Path(root) / service.name
    compose_file = base / "docker-compose.yml"
    logger.info("Deploying %s in Docker under %s", service.name, base)

    try:
        executor.run(["mkdir", "-p", str(base)])
        for directory, owner in service.data_dirs.items():
            executor.run(["mkdir", "-p", str(base / directory)])
            if owner:
                executor.run(["chown", "-R", owner, str(base / directory)])

        executor.run(
            ["install", "-m", "0644", "/dev/stdin", str(compose_file)],
            input=render_compose(service),
        )
        executor.run(["docker", "compose", "-f", str(compose_file), "up", "-d"])
    except CommandError as e:
        raise ToolingMissing(f"{service.name} deployment failed: {e}") from e

    ps = executor.run(
        ["docker", "ps", "--format", "table {{.Names}}\t{{.Status}}\t{{.Ports}}"],
        check=False,
    )
    if service.ready_message:
        logger.info(service.ready_message)
    return "\n".join(ps.stdout.splitlines()[:5])
