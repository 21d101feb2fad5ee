"""Configuration management for hostkit"""

import copy
import os
from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_DIR = Path(os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))) / "hostkit"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.yaml"

RECOMMENDED_PACKAGES = [
    "neofetch",
    "neovim",
    "btop",
    "git",
    "libreoffice",
    "nmap",
    "openssh-server",
]


class ConfigManager:
    """Manage hostkit configuration"""

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path)

    def load(self) -> Dict[str, Any]:
        """Load configuration from file and environment"""
        config = self._load_defaults()

        # Load from file if exists
        if self.config_path.exists():
            with open(self.config_path) as f:
                file_config = yaml.safe_load(f) or {}
                config = self._merge(config, file_config)

        # Override with environment variables
        config = self._apply_env_overrides(config)

        return config

    def save(self, config: Dict[str, Any]) -> None:
        """Save configuration to file"""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False)

    def _load_defaults(self) -> Dict[str, Any]:
        """Load default configuration"""
        return {
            "credential": {
                "path": "/etc/hostkit/credential",
                "max_attempts": 3,
            },
            "tailscale": {
                "api_url": "https://api.tailscale.com/api/v2",
                "tailnet": "",
                "token": "",
                "timeout": 30,
                "install_script_url": "https://tailscale.com/install.sh",
            },
            "access": {
                "tag": "ssh-share",
                "grantee": "",
                "owners": ["autogroup:admin"],
                "users": ["autogroup:nonroot"],
                "required_tools": ["jq", "curl"],
                "push_policy": "changed",
            },
            "install": {
                "recommended": list(RECOMMENDED_PACKAGES),
                "compose_root": "/opt",
            },
            "logging": {
                "level": "info",
                "file": str(CONFIG_DIR / "run.log"),
            },
        }

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge two configuration dictionaries"""
        result = copy.deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides"""
        if tailnet := os.getenv("HOSTKIT_TAILNET"):
            config["tailscale"]["tailnet"] = tailnet

        if token := os.getenv("HOSTKIT_TS_API_TOKEN"):
            config["tailscale"]["token"] = token

        if grantee := os.getenv("HOSTKIT_GRANTEE"):
            config["access"]["grantee"] = grantee

        if path := os.getenv("HOSTKIT_CREDENTIAL_FILE"):
            config["credential"]["path"] = path

        if level := os.getenv("HOSTKIT_LOG_LEVEL"):
            config["logging"]["level"] = level

        return config
