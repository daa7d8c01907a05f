import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.output import ToolOutput

from haiku.knowledge.config import AppConfig, Config
from haiku.knowledge.config.models import ModelConfig
from haiku.knowledge.exceptions import OracleError
from haiku.knowledge.utils import get_model

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)


class ResolutionStrategy(str, Enum):
    """How the oracle resolves malformed or rejected tool calls."""

    IGNORE = "ignore"  # Log and give up on the round
    THROW = "throw"  # Raise on the first bad call
    RETRY = "retry"  # Re-prompt up to max_retries times, then raise


@dataclass
class OracleTool(Generic[OutputT]):
    """The single tool the oracle may call in a round.

    Attributes:
        name: Tool name shown to the model
        description: What calling the tool means
        output_type: Pydantic model the tool arguments are validated against
        validator: Optional check run on the parsed arguments. Raise
            ``pydantic_ai.ModelRetry`` to reject them.
    """

    name: str
    description: str
    output_type: type[OutputT]
    validator: Callable[[OutputT], OutputT] | None = None


class Oracle:
    """Gateway to the LLM that answers routing and editing decisions.

    Every round offers exactly one tool and accepts only a call to it. The
    arguments are validated against the tool's schema before the caller sees
    them; failures are resolved by the configured ``ResolutionStrategy``.
    """

    def __init__(
        self,
        model_config: ModelConfig | None = None,
        app_config: AppConfig = Config,
        resolution_strategy: ResolutionStrategy | str | None = None,
        max_retries: int | None = None,
        model: Any | None = None,
    ):
        """Initialize the oracle.

        Args:
            model_config: Model to use. Defaults to ``app_config.oracle.model``.
            app_config: Application configuration
            resolution_strategy: Override for ``app_config.oracle.resolution_strategy``
            max_retries: Override for ``app_config.oracle.max_retries``
            model: Ready pydantic-ai model (or model name) to use instead of
                building one from ``model_config``
        """
        self._config = app_config
        oracle_config = app_config.oracle

        if model is None:
            model = get_model(model_config or oracle_config.model, app_config)
        self._model = model

        self.resolution_strategy = ResolutionStrategy(
            resolution_strategy or oracle_config.resolution_strategy
        )
        self.max_retries = (
            oracle_config.max_retries if max_retries is None else max_retries
        )

    @property
    def retries(self) -> int:
        if self.resolution_strategy is ResolutionStrategy.RETRY:
            return self.max_retries
        return 0

    def _instructions(self, instructions: str) -> str:
        preamble = self._config.prompts.domain_preamble
        if preamble:
            return f"{preamble}\n\n{instructions}"
        return instructions

    async def respond(
        self,
        tool: OracleTool[OutputT],
        instructions: str,
        messages: Sequence[str],
    ) -> OutputT | None:
        """Run one round and return the validated tool arguments.

        Args:
            tool: The only tool the oracle may call
            instructions: System instructions for the round
            messages: User content blocks, in order

        Returns:
            The parsed tool arguments, or None when the call failed and the
            strategy is ``IGNORE``.

        Raises:
            OracleError: If the call failed and the strategy is ``THROW`` or
                retries were exhausted under ``RETRY``.
        """
        retries = self.retries
        agent: Agent[None, OutputT] = Agent(
            model=self._model,
            output_type=ToolOutput(
                tool.output_type,
                name=tool.name,
                description=tool.description,
                max_retries=retries,
            ),
            instructions=self._instructions(instructions),
            retries=retries,
        )
        if tool.validator is not None:
            agent.output_validator(tool.validator)

        logger.debug(f"Oracle round '{tool.name}' ({len(messages)} messages)")
        try:
            result = await agent.run(list(messages))
        except UnexpectedModelBehavior as e:
            if self.resolution_strategy is ResolutionStrategy.IGNORE:
                logger.warning(f"Ignoring failed oracle round '{tool.name}': {e}")
                return None
            raise OracleError(tool.name, str(e)) from e

        logger.debug(f"Oracle round '{tool.name}' answered: {result.output!r}")
        return result.output
