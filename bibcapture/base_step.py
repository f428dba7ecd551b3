from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from bibcapture.errors import CaptureError
from bibcapture.logging import get_logger
from bibcapture.model.capture import StepOutcome
from bibcapture.session import CaptureSession


class PipelineStep(ABC):
    """abstract base class for all extraction steps."""

    def __init__(self, config: Any = None, name: Optional[str] = None):
        """initialize the pipeline step.

        Args:
            config: Capture configuration (a ``CaptureConfig`` or a plain dict).
            name: Optional name for the step (used for logging).
        """
        self.config = config if config is not None else {}
        if isinstance(self.config, dict):
            self.debug = self.config.get("debug", False)
        else:
            self.debug = getattr(self.config, "debug", False)
        self.name = name or self.__class__.__name__
        self.logger = get_logger(self.name)

    def option(self, key: str, default: Any = None) -> Any:
        """read a setting from either a dict config or a config model."""
        if isinstance(self.config, dict):
            return self.config.get(key, default)
        return getattr(self.config, key, default)

    @abstractmethod
    async def run(self, session: CaptureSession) -> StepOutcome:
        """Run the step against one capture.

        Args:
            session: The capture being processed.

        Returns:
            Whether the pipeline should continue or finish.
        """
        pass

    async def __call__(self, session: CaptureSession) -> StepOutcome:
        """shortway of calling `run`, turning capture errors into failed outcomes.

        Args:
            session: The capture being processed.

        Returns:
            Outcome of the step.
        """
        try:
            return await self.run(session)
        except CaptureError as e:
            return StepOutcome.fail(e)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


async def run_steps(steps: Iterable[PipelineStep], session: CaptureSession) -> StepOutcome:
    """Run ``steps`` in order until one finishes; failed outcomes are raised.

    Returns:
        FINISH if a step finished the chain early, CONTINUE otherwise.
    """
    for step in steps:
        outcome = await step(session)
        session.executed_steps.append(step.name)

        if outcome.is_failed:
            step.logger.error(f"{session.context.link} - {step.name} failed: {outcome.error}")
            raise outcome.error

        if outcome.is_finished:
            step.logger.info(f"{session.context.link} - {step.name} finished the chain")
            session.finished_by = step.name
            return outcome

    return StepOutcome.proceed()
