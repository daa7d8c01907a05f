import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from haiku.knowledge.utils import get_default_data_dir


class ModelConfig(BaseModel):
    """Configuration for a language model.

    Attributes:
        provider: Model provider (ollama, openai, anthropic, etc.)
        name: Model name/identifier
        base_url: Optional base URL for OpenAI-compatible servers (vLLM, LM Studio, etc.)
        enable_thinking: Control reasoning behavior (true/false/None for default)
        temperature: Sampling temperature (0.0 to 1.0+)
        top_p: Nucleus sampling probability mass
        max_tokens: Maximum tokens to generate
    """

    provider: str = "ollama"
    name: str = "gpt-oss"
    base_url: str | None = None

    enable_thinking: bool | None = None
    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None


class StorageConfig(BaseModel):
    backend: Literal["lancedb", "memory"] = "lancedb"
    data_dir: Path = Field(default_factory=get_default_data_dir)


class OracleConfig(BaseModel):
    model: ModelConfig = Field(
        default_factory=lambda: ModelConfig(
            provider="ollama",
            name="gpt-oss",
            enable_thinking=False,
        )
    )
    resolution_strategy: Literal["ignore", "throw", "retry"] = "retry"
    max_retries: int = Field(default=2, ge=0)


class TreeConfig(BaseModel):
    """Shape of the knowledge tree.

    Attributes:
        k: Number of partitions a split asks the oracle for
        max_document_size_chars: Documents longer than this are split; siblings
            whose combined length drops below half of it are merged
    """

    k: int = Field(default=4, ge=2)
    max_document_size_chars: int = Field(default=100_000, gt=0)


class OllamaConfig(BaseModel):
    base_url: str = Field(
        default_factory=lambda: os.environ.get(
            "OLLAMA_BASE_URL", "http://localhost:11434"
        )
    )


class VLLMConfig(BaseModel):
    base_url: str = "http://localhost:8000"


class LMStudioConfig(BaseModel):
    base_url: str = "http://localhost:1234"


class ProvidersConfig(BaseModel):
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    vllm: VLLMConfig = Field(default_factory=VLLMConfig)
    lm_studio: LMStudioConfig = Field(default_factory=LMStudioConfig)


class PromptsConfig(BaseModel):
    domain_preamble: str = ""


class AppConfig(BaseModel):
    environment: str = "production"
    storage: StorageConfig = Field(default_factory=StorageConfig)
    oracle: OracleConfig = Field(default_factory=OracleConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    prompts: PromptsConfig = Field(default_factory=PromptsConfig)
