"""Planning of daily fact reminders.

Only the schedule is computed here; handing the planned reminders to an OS
notification center is left to the platform.
"""

import random
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timedelta
from typing import Any

SAMPLE_FACTS = (
    "Honey never spoils. Archaeologists have found pots of honey in ancient Egyptian tombs that are over 3,000 years old and still perfectly edible.",
    "The shortest war in history was between Britain and Zanzibar on August 27, 1896. Zanzibar surrendered after 38 minutes.",
    "The average person will spend six months of their life waiting for red lights to turn green.",
    "A day on Venus is longer than a year on Venus. Venus rotates so slowly that it takes 243 Earth days to complete one rotation, but it orbits the Sun every 225 Earth days.",
    "Octopuses have three hearts, nine brains, and blue blood.",
    "The world's oldest known living tree is a Great Basin bristlecone pine in the White Mountains of California. It's estimated to be over 5,000 years old.",
    "Cows have best friends and get stressed when they are separated.",
    "A bolt of lightning is about 54,000°F (30,000°C), which is six times hotter than the surface of the sun.",
    "The Hawaiian alphabet has only 12 letters: A, E, I, O, U, H, K, L, M, N, P, and W.",
    "Bananas are berries, but strawberries are not.",
)

NOTIFICATION_TITLE = "Fact Up!"
MIN_FREQUENCY = 1
MAX_FREQUENCY = 10


def format_hour(hour: int) -> str:
    """Format a 0-24 hour as ``"8 AM"`` / ``"12 PM"``."""
    value = hour % 24
    suffix = "PM" if value >= 12 else "AM"
    hour12 = 12 if value == 0 else (value - 12 if value > 12 else value)
    return f"{hour12} {suffix}"


@dataclass(frozen=True)
class NotificationSettings:
    """User preferences for daily reminders.

    Attributes:
        enabled: Whether reminders are scheduled at all.
        frequency: Reminders per day.
        start_hour: First hour of the delivery window (0-23).
        end_hour: End of the delivery window, exclusive (1-24).
    """

    enabled: bool = False
    frequency: int = 5
    start_hour: int = 8
    end_hour: int = 22

    def validated(self) -> "NotificationSettings":
        """Clamp values into their allowed ranges."""
        frequency = max(MIN_FREQUENCY, min(self.frequency, MAX_FREQUENCY))
        start_hour = max(0, min(self.start_hour, 23))
        end_hour = max(start_hour + 1, min(self.end_hour, 24))
        return replace(self, frequency=frequency, start_hour=start_hour, end_hour=end_hour)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotificationSettings":
        defaults = cls()
        return cls(
            enabled=bool(data.get("enabled", defaults.enabled)),
            frequency=int(data.get("frequency", defaults.frequency)),
            start_hour=int(data.get("start_hour", defaults.start_hour)),
            end_hour=int(data.get("end_hour", defaults.end_hour)),
        ).validated()


@dataclass(frozen=True)
class PlannedNotification:
    """One reminder to hand to the platform scheduler."""

    identifier: str
    fire_at: datetime
    title: str
    body: str


def plan_notifications(
    settings: NotificationSettings,
    now: datetime,
    days: int = 7,
    rng: random.Random | None = None,
    facts: tuple[str, ...] = SAMPLE_FACTS,
) -> list[PlannedNotification]:
    """Spread ``frequency`` reminders per day evenly over the delivery window.

    Each reminder gets a random minute inside its hour and a random sample
    fact as its body. Returns an empty list when reminders are disabled.
    """
    if not settings.enabled:
        return []

    settings = settings.validated()
    rng = rng or random.Random()
    window_hours = settings.end_hour - settings.start_hour
    interval = window_hours / settings.frequency
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    planned = []
    for day in range(days):
        for index in range(settings.frequency):
            hour = int(settings.start_hour + index * interval)
            fire_at = midnight + timedelta(days=day, hours=hour, minutes=rng.randrange(60))
            planned.append(
                PlannedNotification(
                    identifier=f"FactNotification-{day}-{index}",
                    fire_at=fire_at,
                    title=NOTIFICATION_TITLE,
                    body=rng.choice(facts),
                )
            )
    return planned


def confirmation_message(settings: NotificationSettings) -> str:
    settings = settings.validated()
    return (
        f"You'll receive {settings.frequency} interesting facts per day between "
        f"{format_hour(settings.start_hour)} and {format_hour(settings.end_hour)}."
    )
