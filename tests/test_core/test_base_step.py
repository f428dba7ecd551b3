"""Tests for the step base class and chain runner."""

import pytest

from bibcapture.base_step import PipelineStep, run_steps
from bibcapture.config import CaptureConfig
from bibcapture.errors import FetchError
from bibcapture.model.capture import StepOutcome, StepStatus


class RecordingStep(PipelineStep):
    def __init__(self, outcome=None, error=None, name=None):
        super().__init__({}, name)
        self.outcome = outcome or StepOutcome.proceed()
        self.error = error
        self.calls = 0

    async def run(self, session):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.outcome


class TestPipelineStep:
    """Test cases for PipelineStep."""

    def test_default_name(self):
        step = RecordingStep()

        assert step.name == "RecordingStep"
        assert step.debug is False

    def test_option_from_dict(self):
        step = RecordingStep()
        step.config = {"default_type": "article"}

        assert step.option("default_type") == "article"
        assert step.option("missing", "fallback") == "fallback"

    def test_option_from_model(self):
        class ModelStep(RecordingStep):
            def __init__(self, config):
                PipelineStep.__init__(self, config)

        step = ModelStep(CaptureConfig(debug=True, default_type="online"))

        assert step.debug is True
        assert step.option("default_type") == "online"

    @pytest.mark.asyncio
    async def test_call_converts_errors(self, session_factory):
        error = FetchError("offline")
        step = RecordingStep(error=error)

        outcome = await step(session_factory("https://example.com"))

        assert outcome.status is StepStatus.FAILED
        assert outcome.error is error


class TestRunSteps:
    """Test cases for run_steps."""

    @pytest.mark.asyncio
    async def test_runs_all_in_order(self, session_factory):
        session = session_factory("https://example.com")
        steps = [RecordingStep(name="a"), RecordingStep(name="b")]

        outcome = await run_steps(steps, session)

        assert not outcome.is_finished
        assert session.executed_steps == ["a", "b"]
        assert session.finished_by is None

    @pytest.mark.asyncio
    async def test_finish_short_circuits(self, session_factory):
        session = session_factory("https://example.com")
        later = RecordingStep(name="later")
        steps = [RecordingStep(name="first"), RecordingStep(StepOutcome.finish(), name="done"), later]

        outcome = await run_steps(steps, session)

        assert outcome.is_finished
        assert later.calls == 0
        assert session.finished_by == "done"
        assert session.executed_steps == ["first", "done"]

    @pytest.mark.asyncio
    async def test_failure_propagates(self, session_factory):
        session = session_factory("https://example.com")
        later = RecordingStep(name="later")

        with pytest.raises(FetchError):
            await run_steps([RecordingStep(error=FetchError("offline"), name="broken"), later], session)

        assert later.calls == 0
        assert session.executed_steps == ["broken"]
