"""
Flow Service - Application Orchestration Layer

This service is the entry point for every flow session operation. It wires
a FlowController to its collaborators (log store, save action, renderer),
keeps live sessions in the session repository and tears them down when the
user saves or cancels.
"""

import inspect
import logging
import uuid
from datetime import datetime
from typing import Any, Callable, List, Literal, Optional, Sequence

from pydantic import BaseModel

from ..domain.models import FlowConfig
from ..exceptions import InvalidFieldValueError
from ..execution.controller import FlowController
from ..registries.actions import DEFAULT_SAVE_ACTION, ActionRegistry, SaveContext, action_registry
from ..registries.validation import ValidationRegistry, validation_registry
from ..registries.visualization import VisualizationRegistry, visualization_registry
from ..rendering.models import RenderedStep
from ..rendering.renderer import DEFAULT_VIEWPORT_WIDTH, FlowRenderer
from ..rendering.weather import WeatherProvider
from ..repositories.flow import FlowRepository
from ..repositories.log_store import LogStore
from ..repositories.session import FlowSession, SessionRepository
from ..state.models import ValidationResult
from .exceptions import FieldNotRenderedError, InvalidFieldChangeError, SessionNotFoundError

logger = logging.getLogger(__name__)

NavigationAction = Literal["next", "back", "goto"]
ValidationScope = Literal["step", "all"]


class SaveOutcome(BaseModel):
    """
    saved: the record was handed to the log store and the session closed.
    invalid: validation failed; `validation` holds the errors (and, for an
        early save, the step the user was moved to).
    in_progress: another save for this session is still running.
    """
    status: Literal["saved", "invalid", "in_progress"]
    validation: Optional[ValidationResult] = None


class FlowService:
    def __init__(
        self,
        flow_repository: FlowRepository,
        session_repository: SessionRepository,
        log_store: LogStore,
        actions: ActionRegistry = action_registry,
        validations: ValidationRegistry = validation_registry,
        visualizations: VisualizationRegistry = visualization_registry,
        weather_provider: Optional[WeatherProvider] = None,
        viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.flow_repo = flow_repository
        self.session_repo = session_repository
        self.log_store = log_store
        self.actions = actions
        self.validations = validations
        self.visualizations = visualizations
        self.weather_provider = weather_provider
        self.viewport_width = viewport_width
        self.clock = clock

    def list_flows(self) -> List[FlowConfig]:
        return self.flow_repo.list_flows()

    def create_session(self, flow_id: str) -> FlowSession:
        """Mounts a new flow instance seeded from the flow's initial data."""
        config = self.flow_repo.get_flow(flow_id)
        save_action = self.actions.lookup(config.save_action_key or DEFAULT_SAVE_ACTION)
        session_id = str(uuid.uuid4())

        def on_save(form_data):
            save_action(
                form_data,
                SaveContext(
                    add_log=lambda record: self.log_store.add_log(config.id, record),
                    on_complete=lambda: self._finish(session_id),
                ),
            )

        def on_cancel():
            self._finish(session_id)

        controller = FlowController(
            config,
            on_save=on_save,
            on_cancel=on_cancel,
            registry=self.validations,
        )
        renderer = FlowRenderer(
            controller,
            visualizations=self.visualizations,
            weather_provider=self.weather_provider,
            clock=self.clock,
            viewport_width=self.viewport_width,
        )
        session = FlowSession(
            session_id=session_id, flow_id=config.id, controller=controller, renderer=renderer
        )
        self.session_repo.save(session)
        logger.info(f"Started '{config.id}' session {session_id}")
        return session

    def get_session(self, session_id: str) -> FlowSession:
        session = self.session_repo.get(session_id)
        if not session:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    def render(self, session_id: str) -> RenderedStep:
        return self.get_session(session_id).renderer.render()

    def change_field(
        self,
        session_id: str,
        field_id: str,
        value: Any = None,
        action: Optional[str] = None,
        args: Sequence[Any] = (),
    ) -> RenderedStep:
        """
        Applies a change to a field rendered on the current step, either
        through its on_change (a new value) or through a named action.
        Hidden or unconfigured fields cannot be changed.
        """
        session = self.get_session(session_id)
        field = session.renderer.render().get_field(field_id)
        if field is None:
            raise FieldNotRenderedError(
                f"Field '{field_id}' is not rendered on step {session.controller.current_step}"
            )

        if action is None:
            handler, call_args = field.on_change, (value,)
        elif action in field.actions:
            handler, call_args = field.actions[action], tuple(args)
        else:
            raise InvalidFieldChangeError(
                f"Field '{field_id}' has no action '{action}'; available: {sorted(field.actions)}"
            )

        try:
            inspect.signature(handler).bind(*call_args)
        except TypeError as e:
            raise InvalidFieldChangeError(f"Invalid arguments for field '{field_id}': {e}") from e

        # Only shape errors raised by the field's own handler become client
        # errors. Anything raised by the controller or its transforms propagates.
        try:
            handler(*call_args)
        except InvalidFieldValueError as e:
            raise InvalidFieldChangeError(f"Invalid change for field '{field_id}': {e}") from e

        return session.renderer.render()

    def navigate(
        self, session_id: str, action: NavigationAction, step: Optional[int] = None
    ) -> RenderedStep:
        session = self.get_session(session_id)
        controller = session.controller
        if action == "next":
            controller.go_to_next_step()
        elif action == "back":
            controller.go_to_previous_step()
        elif action == "goto" and step is not None:
            controller.go_to_step(step)
        return session.renderer.render()

    def validate(self, session_id: str, scope: ValidationScope = "step") -> ValidationResult:
        controller = self.get_session(session_id).controller
        if scope == "all":
            return controller.validate_all_steps()
        return controller.validate_step()

    async def save(self, session_id: str, early: bool = False) -> SaveOutcome:
        """
        Saves the session. An early save (leaving the flow before the last
        step) validates every step and moves the user to the first invalid
        one instead of saving.
        """
        controller = self.get_session(session_id).controller

        if early:
            result = controller.validate_all_steps()
            if not result.is_valid:
                controller.go_to_step(result.step_index)
                return SaveOutcome(status="invalid", validation=result)

        if controller.is_saving:
            return SaveOutcome(status="in_progress")

        saved = await controller.save()
        if saved:
            return SaveOutcome(status="saved")
        return SaveOutcome(
            status="invalid",
            validation=ValidationResult.fail(dict(controller.errors)),
        )

    def cancel(self, session_id: str) -> None:
        self.get_session(session_id).controller.cancel()
        logger.info(f"Cancelled session {session_id}")

    def _finish(self, session_id: str) -> None:
        session = self.session_repo.get(session_id)
        if session:
            session.controller.close()
            self.session_repo.delete(session_id)
