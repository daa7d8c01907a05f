import sys
from pathlib import Path
from typing import Any


def apply_common_settings(
    settings: Any | None,
    settings_class: type[Any],
    model_config: Any,
) -> Any | None:
    """Apply common settings (temperature, top_p, max_tokens) to model settings.

    Args:
        settings: Existing settings instance or None
        settings_class: Settings class to instantiate if needed
        model_config: ModelConfig with temperature, top_p and max_tokens

    Returns:
        Updated settings instance or None if no settings to apply
    """
    if (
        model_config.temperature is None
        and model_config.top_p is None
        and model_config.max_tokens is None
    ):
        return settings

    if settings is None:
        settings_dict = settings_class()
    else:
        settings_dict = settings

    if model_config.temperature is not None:
        settings_dict["temperature"] = model_config.temperature

    if model_config.top_p is not None:
        settings_dict["top_p"] = model_config.top_p

    if model_config.max_tokens is not None:
        settings_dict["max_tokens"] = model_config.max_tokens

    return settings_dict


def _reasoning_settings(model_config: Any, settings_class: type[Any]) -> Any | None:
    if model_config.enable_thinking is None:
        return None
    effort = "high" if model_config.enable_thinking else "low"
    return settings_class(openai_reasoning_effort=effort)


def get_model(
    model_config: Any,
    app_config: Any | None = None,
) -> Any:
    """
    Get a model instance for the specified configuration.

    Args:
        model_config: ModelConfig with provider, model, and settings
        app_config: AppConfig for provider base URLs (defaults to global Config)

    Returns:
        A configured model instance
    """
    from pydantic_ai.models.openai import OpenAIChatModel, OpenAIChatModelSettings
    from pydantic_ai.providers.ollama import OllamaProvider
    from pydantic_ai.providers.openai import OpenAIProvider

    if app_config is None:
        from haiku.knowledge.config import Config

        app_config = Config

    provider = model_config.provider
    model = model_config.name

    if provider == "ollama":
        model_settings = None

        # Apply thinking control for gpt-oss
        if model == "gpt-oss":
            model_settings = _reasoning_settings(model_config, OpenAIChatModelSettings)

        model_settings = apply_common_settings(
            model_settings, OpenAIChatModelSettings, model_config
        )

        base_url = model_config.base_url or app_config.providers.ollama.base_url
        return OpenAIChatModel(
            model_name=model,
            provider=OllamaProvider(base_url=f"{base_url}/v1"),
            settings=model_settings,
        )

    elif provider == "openai":
        openai_settings = _reasoning_settings(model_config, OpenAIChatModelSettings)
        openai_settings = apply_common_settings(
            openai_settings, OpenAIChatModelSettings, model_config
        )

        if model_config.base_url:
            return OpenAIChatModel(
                model_name=model,
                provider=OpenAIProvider(base_url=model_config.base_url),
                settings=openai_settings,
            )
        return OpenAIChatModel(model_name=model, settings=openai_settings)

    elif provider == "anthropic":
        from pydantic_ai.models.anthropic import AnthropicModel, AnthropicModelSettings

        anthropic_settings: Any = None

        # Apply thinking control
        if model_config.enable_thinking is not None:
            if model_config.enable_thinking:
                anthropic_settings = AnthropicModelSettings(
                    anthropic_thinking={"type": "enabled", "budget_tokens": 4096}
                )
            else:
                anthropic_settings = AnthropicModelSettings(
                    anthropic_thinking={"type": "disabled"}
                )

        anthropic_settings = apply_common_settings(
            anthropic_settings, AnthropicModelSettings, model_config
        )

        return AnthropicModel(model_name=model, settings=anthropic_settings)

    elif provider == "gemini":
        from pydantic_ai.models.google import GoogleModel, GoogleModelSettings

        gemini_settings: Any = None

        if model_config.enable_thinking is not None:
            gemini_settings = GoogleModelSettings(
                google_thinking_config={
                    "include_thoughts": model_config.enable_thinking
                }
            )

        gemini_settings = apply_common_settings(
            gemini_settings, GoogleModelSettings, model_config
        )

        return GoogleModel(model_name=model, settings=gemini_settings)

    elif provider == "groq":
        from pydantic_ai.models.groq import GroqModel, GroqModelSettings

        groq_settings: Any = None

        if model_config.enable_thinking is not None:
            if model_config.enable_thinking:
                groq_settings = GroqModelSettings(groq_reasoning_format="parsed")
            else:
                groq_settings = GroqModelSettings(groq_reasoning_format="hidden")

        groq_settings = apply_common_settings(
            groq_settings, GroqModelSettings, model_config
        )

        return GroqModel(model_name=model, settings=groq_settings)

    elif provider in ("vllm", "lm_studio"):
        model_settings = None

        if model == "gpt-oss":
            model_settings = _reasoning_settings(model_config, OpenAIChatModelSettings)

        model_settings = apply_common_settings(
            model_settings, OpenAIChatModelSettings, model_config
        )

        provider_config = getattr(app_config.providers, provider)
        base_url = model_config.base_url or provider_config.base_url
        return OpenAIChatModel(
            model_name=model,
            provider=OpenAIProvider(base_url=f"{base_url}/v1", api_key="none"),
            settings=model_settings,
        )

    else:
        # For any other provider, use string format and let Pydantic AI handle it
        return f"{provider}:{model}"


def get_default_data_dir() -> Path:
    """Get the user data directory for the current system platform.

    Linux: ~/.local/share/haiku.knowledge
    macOS: ~/Library/Application Support/haiku.knowledge
    Windows: C:/Users/<USER>/AppData/Roaming/haiku.knowledge

    Returns:
        User Data Path.
    """
    home = Path.home()

    system_paths = {
        "win32": home / "AppData/Roaming/haiku.knowledge",
        "linux": home / ".local/share/haiku.knowledge",
        "darwin": home / "Library/Application Support/haiku.knowledge",
    }

    data_path = system_paths.get(sys.platform, home / ".haiku.knowledge")
    return data_path
