"""
Renderer - Field-Type Dispatch Layer

The FlowRenderer resolves the controller's current step into RenderedField
and RenderedContent objects for the presentation layer:

1. Weather slots of the step are seeded once, if still unset.
2. Each field's visibility rule is evaluated against the render moment.
   Hidden fields are skipped entirely; their stored values stay untouched.
3. Visualization keys are resolved through the Visualization Registry.
4. The field's type tag selects its accessor, which wires every change
   back into the controller.
5. Content blocks are projected from the current form data.

The controller is passed in explicitly; there is no ambient "current flow".
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional

from ..domain.models import FieldConfig, StepConfig, WeatherSummaryBlock
from ..exceptions import InactiveControllerError
from ..execution.controller import FlowController
from ..registries.visualization import (
    VisualizationRegistry,
    card_size_for,
    visualization_registry,
)
from .accessors import FieldContext, build_field
from .content import project_block
from .models import RenderedField, RenderedStep
from .visibility import is_visible
from .weather import WeatherProvider

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT_WIDTH = 390


class FlowRenderer:
    def __init__(
        self,
        controller: FlowController,
        visualizations: VisualizationRegistry = visualization_registry,
        weather_provider: Optional[WeatherProvider] = None,
        clock: Callable[[], datetime] = datetime.now,
        viewport_width: float = DEFAULT_VIEWPORT_WIDTH,
    ):
        self.controller = controller
        self.visualizations = visualizations
        self.weather_provider = weather_provider
        self.clock = clock
        self.viewport_width = viewport_width

    def render(self) -> RenderedStep:
        if not self.controller.is_active:
            raise InactiveControllerError(
                f"Cannot render flow '{self.controller.config.id}': controller is closed."
            )

        step = self.controller.current_step_config
        self._seed_weather(step)

        now = self.clock()
        form_data = self.controller.form_data
        errors = self.controller.errors

        fields = []
        for field in step.fields:
            rendered = self.render_field(field, form_data, errors, now)
            if rendered is not None:
                fields.append(rendered)

        projected = [project_block(block, form_data) for block in step.content]

        return RenderedStep(
            step_id=step.id,
            step_number=self.controller.current_step,
            total_steps=self.controller.total_steps,
            title=step.title,
            subtitle=step.subtitle,
            fields=fields,
            content=[block for block in projected if block.type != "note"],
            notes=[block for block in projected if block.type == "note"],
        )

    def render_field(
        self,
        field: FieldConfig,
        form_data: Mapping[str, Any],
        errors: Mapping[str, str],
        now: datetime,
    ) -> Optional[RenderedField]:
        if not is_visible(field.visibility, now):
            logger.debug(f"Field '{field.id}' hidden at {now:%H:%M}")
            return None

        visualization = None
        if field.visualization_key:
            visualization = self.visualizations.lookup(
                field.visualization_key, self.visualization_context
            )

        ctx = FieldContext(
            controller=self.controller,
            form_data=form_data,
            error=errors.get(field.field_key),
            visualization=visualization,
            now=now,
        )
        return build_field(field, ctx)

    @property
    def visualization_context(self) -> Dict[str, Any]:
        return {"card_size": card_size_for(self.viewport_width)}

    def _seed_weather(self, step: StepConfig) -> None:
        if self.weather_provider is None:
            return

        for block in step.content:
            if isinstance(block, WeatherSummaryBlock):
                self.controller.seed_if_unset(
                    block.pressure_key, lambda block=block: self._weather_values(block)
                )

    def _weather_values(self, block: WeatherSummaryBlock) -> Dict[str, Any]:
        reading = self.weather_provider.current()
        return {
            block.pressure_key: reading.pressure,
            block.temperature_key: reading.temperature,
            block.humidity_key: reading.humidity,
        }
