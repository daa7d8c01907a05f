import pytest

from haiku.knowledge.config import AppConfig
from haiku.knowledge.config.loader import (
    find_config_file,
    generate_default_config,
    load_yaml_config,
)


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run with no env override and an empty cwd and home directory."""
    monkeypatch.delenv("HAIKU_KNOWLEDGE_CONFIG_PATH", raising=False)
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(cwd)
    monkeypatch.setenv("HOME", str(home))
    return cwd, home


def test_load_yaml_config(tmp_path):
    """Test loading a YAML config file."""
    config_file = tmp_path / "test.yaml"
    config_file.write_text("""
environment: production
oracle:
  model:
    provider: openai
    name: gpt-4o
tree:
  k: 3
""")

    config = load_yaml_config(config_file)
    assert config["environment"] == "production"
    assert config["oracle"]["model"]["provider"] == "openai"
    assert config["tree"]["k"] == 3


def test_load_empty_yaml_config(tmp_path):
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    assert load_yaml_config(config_file) == {}


def test_find_config_file_cwd(isolated):
    """Test finding config in current directory."""
    cwd, _ = isolated
    config_file = cwd / "haiku.knowledge.yaml"
    config_file.write_text("environment: production")

    assert find_config_file() == config_file


def test_find_config_file_user_config(isolated):
    """Test finding config in user config directory."""
    _, home = isolated
    config_dir = home / ".config" / "haiku.knowledge"
    config_dir.mkdir(parents=True)
    config_file = config_dir / "config.yaml"
    config_file.write_text("environment: production")

    assert find_config_file() == config_file


def test_find_config_file_cli_path(tmp_path):
    """Test finding config via CLI path parameter."""
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("environment: production")

    assert find_config_file(config_file) == config_file


def test_find_config_file_env_var(tmp_path, monkeypatch):
    """Test finding config via HAIKU_KNOWLEDGE_CONFIG_PATH env var."""
    config_file = tmp_path / "from-env.yaml"
    config_file.write_text("environment: production")
    monkeypatch.setenv("HAIKU_KNOWLEDGE_CONFIG_PATH", str(config_file))

    assert find_config_file() == config_file


def test_find_config_file_env_var_missing(tmp_path, monkeypatch):
    monkeypatch.setenv("HAIKU_KNOWLEDGE_CONFIG_PATH", str(tmp_path / "nope.yaml"))

    with pytest.raises(FileNotFoundError):
        find_config_file()


def test_find_config_file_not_found(isolated):
    """Test returning None when no config found."""
    assert find_config_file() is None


def test_find_config_file_cli_path_not_exists(tmp_path):
    """Test error when CLI path doesn't exist."""
    with pytest.raises(FileNotFoundError):
        find_config_file(tmp_path / "nonexistent.yaml")


def test_generate_default_config():
    """Test generating default config structure."""
    config = generate_default_config()

    assert config["environment"] == "production"
    assert config["storage"]["backend"] == "lancedb"
    assert config["oracle"]["model"]["provider"] == "ollama"
    assert config["oracle"]["resolution_strategy"] == "retry"
    assert config["tree"] == {"k": 4, "max_document_size_chars": 100000}
    assert "providers" in config


def test_generated_default_config_is_valid():
    config = AppConfig.model_validate(generate_default_config())

    assert config.tree.k == 4
    assert config.oracle.max_retries == 2


def test_config_precedence_cwd_over_user(isolated):
    """Test that cwd config takes precedence over user config."""
    cwd, home = isolated

    cwd_config = cwd / "haiku.knowledge.yaml"
    cwd_config.write_text("environment: from-cwd")

    user_dir = home / ".config" / "haiku.knowledge"
    user_dir.mkdir(parents=True)
    (user_dir / "config.yaml").write_text("environment: from-user")

    found = find_config_file()
    assert found == cwd_config
    assert found is not None

    config_data = load_yaml_config(found)
    assert config_data["environment"] == "from-cwd"


def test_config_precedence_env_var_over_cwd(isolated, tmp_path, monkeypatch):
    """Test that HAIKU_KNOWLEDGE_CONFIG_PATH env var takes precedence."""
    cwd, _ = isolated

    cwd_config = cwd / "haiku.knowledge.yaml"
    cwd_config.write_text("environment: from-cwd")

    env_config = tmp_path / "from-env.yaml"
    env_config.write_text("environment: from-env-var")
    monkeypatch.setenv("HAIKU_KNOWLEDGE_CONFIG_PATH", str(env_config))

    found = find_config_file()
    assert found == env_config
    assert found is not None

    config = load_yaml_config(found)
    assert config["environment"] == "from-env-var"
