import os
import tempfile
from pathlib import Path

# Prevent tests from loading user's local haiku.knowledge.yaml by setting env var
# to an empty config file BEFORE any haiku.knowledge imports.
# This ensures tests always use default config values.
_test_config_dir = tempfile.mkdtemp()
_test_config_path = Path(_test_config_dir) / "test-defaults.yaml"
_test_config_path.write_text("{}")  # Empty YAML = use all defaults
os.environ["HAIKU_KNOWLEDGE_CONFIG_PATH"] = str(_test_config_path)

import pytest  # noqa: E402
from pydantic_ai.messages import (  # noqa: E402
    ModelMessage,
    ModelRequest,
    ModelResponse,
    TextPart,
    ToolCallPart,
    UserPromptPart,
)
from pydantic_ai.models.function import AgentInfo, FunctionModel  # noqa: E402

from haiku.knowledge.config import AppConfig  # noqa: E402
from haiku.knowledge.oracle import Oracle  # noqa: E402


class ScriptedOracle:
    """Deterministic stand-in for the LLM behind an ``Oracle``.

    Answers are queued per tool name. Each round pops the next answer for the
    tool on offer; the last answer of a queue is reused once the rest are
    consumed. A dict answer becomes the tool call arguments, a str answer a
    plain text reply.
    """

    def __init__(self, answers: dict[str, list | dict | str]):
        self._answers = {
            name: list(value) if isinstance(value, list) else [value]
            for name, value in answers.items()
        }
        self.calls: list[tuple[str, list[ModelMessage]]] = []
        self.model = FunctionModel(self._respond)

    def _respond(self, messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        assert len(info.output_tools) == 1
        tool_name = info.output_tools[0].name
        self.calls.append((tool_name, messages))

        queue = self._answers.get(tool_name)
        if not queue:
            raise AssertionError(f"Unexpected oracle round '{tool_name}'")
        answer = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(answer, str):
            return ModelResponse(parts=[TextPart(content=answer)])
        return ModelResponse(parts=[ToolCallPart(tool_name=tool_name, args=answer)])

    @property
    def rounds(self) -> list[str]:
        return [name for name, _ in self.calls]

    def prompt(self, index: int) -> str:
        """Text of the user prompt sent in round ``index``."""
        _, messages = self.calls[index]
        texts: list[str] = []
        for message in messages:
            if not isinstance(message, ModelRequest):
                continue
            for part in message.parts:
                if isinstance(part, UserPromptPart):
                    content = part.content
                    if isinstance(content, str):
                        texts.append(content)
                    else:
                        texts.extend(c for c in content if isinstance(c, str))
        return "\n".join(texts)

    def instructions(self, index: int) -> str:
        _, messages = self.calls[index]
        for message in messages:
            if isinstance(message, ModelRequest) and message.instructions:
                return message.instructions
        return ""


@pytest.fixture
def scripted_oracle():
    """Build an ``Oracle`` answered by a ``ScriptedOracle``.

    Returns a factory ``(answers, **oracle_kwargs) -> (oracle, script)``.
    """

    def factory(answers: dict, config: AppConfig | None = None, **kwargs):
        script = ScriptedOracle(answers)
        oracle = Oracle(app_config=config or AppConfig(), model=script.model, **kwargs)
        return oracle, script

    return factory


@pytest.fixture
def temp_db_path():
    """Create a temporary database path for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir) / "test.lancedb"


@pytest.fixture
def temp_yaml_config(tmp_path, monkeypatch):
    """Create a temporary YAML config file for testing.

    This fixture creates a config file in a temp directory and sets
    the environment variable so the config loader will find it.
    """
    import yaml

    config_file = tmp_path / "test-config.yaml"
    config_data = {
        "environment": "production",
        "storage": {"backend": "memory"},
        "oracle": {"model": {"provider": "ollama", "name": "gpt-oss"}},
        "tree": {"k": 3, "max_document_size_chars": 500},
    }

    with open(config_file, "w") as f:
        yaml.dump(config_data, f)

    # Set env var so config loader will find it
    monkeypatch.setenv("HAIKU_KNOWLEDGE_CONFIG_PATH", str(config_file))

    yield config_file
