import attrs

from src.platform.config.core_setting import Settings


@attrs.define(frozen=True)
class HoldPolicy:
    """Fixed limits bounding how long an abandoned hold can starve inventory"""

    max_seats: int = 10
    initial_hold_seconds: int = 600
    extension_seconds: int = 300
    max_extensions: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> 'HoldPolicy':
        return cls(
            max_seats=settings.RESERVATION_MAX_SEATS,
            initial_hold_seconds=settings.RESERVATION_INITIAL_HOLD_SECONDS,
            extension_seconds=settings.RESERVATION_EXTENSION_SECONDS,
            max_extensions=settings.RESERVATION_MAX_EXTENSIONS,
        )

    @property
    def extension_minutes(self) -> int:
        return self.extension_seconds // 60
