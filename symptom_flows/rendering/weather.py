"""
Weather Source Interface.

Supplies the readings used to seed weather slots the first time a step with
a weather summary is rendered.
"""
import random
from abc import ABC, abstractmethod
from typing import Literal, Optional

from pydantic import BaseModel

PressureTrend = Literal["rising", "falling", "stable"]


class WeatherReading(BaseModel):
    pressure: PressureTrend
    temperature: int
    humidity: int


class WeatherProvider(ABC):
    @abstractmethod
    def current(self) -> WeatherReading:
        """Returns the reading to store for a new log entry."""
        pass


class SimulatedWeatherProvider(WeatherProvider):
    """
    Stand-in until a real weather service is wired: picks plausible values
    at random.
    """

    PRESSURES = ("rising", "falling", "stable")
    TEMPERATURES = (42, 48, 55, 62, 68)
    HUMIDITIES = (45, 58, 65, 72, 80)

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def current(self) -> WeatherReading:
        return WeatherReading(
            pressure=self._rng.choice(self.PRESSURES),
            temperature=self._rng.choice(self.TEMPERATURES),
            humidity=self._rng.choice(self.HUMIDITIES),
        )
