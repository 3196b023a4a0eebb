"""Top-level application state: the unit of persistence, import and sync."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from weekly_keeper.models.expense import ShiftMode
from weekly_keeper.models.week import WeekData, WeekDefaults


# Bump when the persisted shape changes; see store.migration.
SCHEMA_VERSION = 2


class AppState(BaseModel):
    """
    Global defaults plus every week ever opened.

    Global defaults only seed weeks created after they are set.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    schema_version: int = Field(default=SCHEMA_VERSION, ge=1)
    global_daily_subsidy_default: float = Field(default=28.0, ge=0)
    global_hourly_rate_default: float = Field(default=0.0, ge=0)
    global_shift_default: ShiftMode = ShiftMode.DAY
    weeks: dict[str, WeekData] = Field(default_factory=dict)

    @property
    def defaults(self) -> WeekDefaults:
        """The template used for newly created weeks."""
        return WeekDefaults(
            daily_subsidy=self.global_daily_subsidy_default,
            hourly_rate=self.global_hourly_rate_default,
            shift_mode=self.global_shift_default,
        )
