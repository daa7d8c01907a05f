import os
from pathlib import Path

import yaml


def find_config_file(cli_path: Path | None = None) -> Path | None:
    """Find the YAML config file using the search path.

    Search order:
    1. CLI-provided path (if given)
    2. HAIKU_KNOWLEDGE_CONFIG_PATH environment variable
    3. ./haiku.knowledge.yaml (current directory)
    4. ~/.config/haiku.knowledge/config.yaml (user config)

    Returns None if no config file is found.
    """
    if cli_path:
        if cli_path.exists():
            return cli_path
        raise FileNotFoundError(f"Config file not found: {cli_path}")

    env_path = os.environ.get("HAIKU_KNOWLEDGE_CONFIG_PATH")
    if env_path:
        path = Path(env_path)
        if path.exists():
            return path
        raise FileNotFoundError(
            f"Config file from HAIKU_KNOWLEDGE_CONFIG_PATH not found: {path}"
        )

    cwd_config = Path.cwd() / "haiku.knowledge.yaml"
    if cwd_config.exists():
        return cwd_config

    user_config_dir = Path.home() / ".config" / "haiku.knowledge"
    user_config = user_config_dir / "config.yaml"
    if user_config.exists():
        return user_config

    return None


def load_yaml_config(path: Path) -> dict:
    """Load and parse a YAML config file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return data or {}


def generate_default_config() -> dict:
    """Generate a default YAML config structure."""
    return {
        "environment": "production",
        "storage": {"backend": "lancedb"},
        "oracle": {
            "model": {
                "provider": "ollama",
                "name": "gpt-oss",
                "enable_thinking": False,
            },
            "resolution_strategy": "retry",
            "max_retries": 2,
        },
        "tree": {"k": 4, "max_document_size_chars": 100000},
        "providers": {
            "ollama": {"base_url": "http://localhost:11434"},
            "vllm": {"base_url": "http://localhost:8000"},
            "lm_studio": {"base_url": "http://localhost:1234"},
        },
        "prompts": {"domain_preamble": ""},
    }
