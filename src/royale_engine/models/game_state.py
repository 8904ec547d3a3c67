"""Match state models.

Models:
    LogEntry: One line of the player-facing match transcript.
    FlavorEvent: A templated two-actor flavor text.
    MatchSummary: Terminal report handed to the persistence sink.
    MatchState: The roster, clock and transcript of one match.
"""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from royale_engine.models.entities import Actor
from royale_engine.models.enums import (
    FlavorEventType,
    FlavorTime,
    LogKind,
    MatchStatus,
    TimeOfDay,
)


# =============================================================================
# Transcript
# =============================================================================


class LogEntry(BaseModel):
    """One line of the match transcript.

    Attributes:
        text: Rendered text.
        kind: Presentation class.
        day: Day the line was produced on.
        time_of_day: Phase the line was produced in.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    kind: LogKind = LogKind.NORMAL
    day: Annotated[int, Field(ge=0)] = 0
    time_of_day: TimeOfDay = TimeOfDay.MORNING


class FlavorEvent(BaseModel):
    """A flavor text template with ``{1}``/``{2}`` name placeholders.

    ``survivor_count``/``victim_count`` are None for legacy records that
    predate the counts.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = ""
    text: str = Field(min_length=1)
    type: FlavorEventType = FlavorEventType.NORMAL
    time_of_day: FlavorTime = FlavorTime.BOTH
    survivor_count: int | None = None
    victim_count: int | None = None

    def allows(self, time_of_day: TimeOfDay) -> bool:
        """Check whether the template may be used in the given phase."""
        if self.time_of_day is FlavorTime.BOTH:
            return True
        if time_of_day.is_night:
            return self.time_of_day is FlavorTime.NIGHT
        return self.time_of_day is FlavorTime.DAY


# =============================================================================
# Match
# =============================================================================


class MatchSummary(BaseModel):
    """Terminal report of a match.

    Attributes:
        match_id: Identifier of the match.
        ruleset_id: Ruleset the match ran under.
        winner_id: Id of the sole survivor, or None if nobody survived.
        winner_name: Display name of the winner.
        kills: Kills per actor id.
        casualties: Ids of fallen actors in death order.
        days: Day the match ended on.
        log: Full transcript.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    match_id: str
    ruleset_id: str
    winner_id: str | None = None
    winner_name: str | None = None
    kills: dict[str, int] = Field(default_factory=dict)
    casualties: list[str] = Field(default_factory=list)
    days: int = 0
    log: list[LogEntry] = Field(default_factory=list)


class MatchState(BaseModel):
    """Mutable state of one match.

    The orchestrator owns this object for the duration of a phase. A fresh
    match starts on day 0 at night so that the first advance lands on the
    morning of day 1.

    Example:
        >>> state = MatchState(actors=[alice, bob])
        >>> state.status
        <MatchStatus.NOT_STARTED: 'not_started'>
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    match_id: str = Field(default_factory=lambda: uuid4().hex)
    ruleset_id: str = "ER_S10"
    day: Annotated[int, Field(ge=0)] = 0
    time_of_day: TimeOfDay = TimeOfDay.NIGHT
    status: MatchStatus = MatchStatus.NOT_STARTED
    actors: list[Actor] = Field(default_factory=list)
    casualties: list[str] = Field(default_factory=list)
    kills: dict[str, int] = Field(default_factory=dict)
    log: list[LogEntry] = Field(default_factory=list)
    winner_id: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def alive_count(self) -> int:
        return sum(1 for actor in self.actors if actor.is_alive)

    @property
    def is_finished(self) -> bool:
        return self.status is MatchStatus.FINISHED

    def alive_actors(self) -> list[Actor]:
        """Living actors in roster order."""
        return [actor for actor in self.actors if actor.is_alive]

    def get_actor(self, actor_id: str | None) -> Actor | None:
        for actor in self.actors:
            if actor.id == actor_id:
                return actor
        return None

    def add_log(self, text: str, kind: LogKind = LogKind.NORMAL) -> LogEntry:
        """Append a transcript line stamped with the current clock."""
        entry = LogEntry(text=text, kind=kind, day=self.day, time_of_day=self.time_of_day)
        self.log.append(entry)
        return entry

    def record_kill(self, killer_id: str) -> None:
        self.kills[killer_id] = self.kills.get(killer_id, 0) + 1

    def summary(self) -> MatchSummary:
        """Build the terminal report for the persistence sink."""
        winner = self.get_actor(self.winner_id)
        return MatchSummary(
            match_id=self.match_id,
            ruleset_id=self.ruleset_id,
            winner_id=self.winner_id,
            winner_name=winner.name if winner else None,
            kills=dict(self.kills),
            casualties=list(self.casualties),
            days=self.day,
            log=list(self.log),
        )


__all__ = [
    "LogEntry",
    "FlavorEvent",
    "MatchSummary",
    "MatchState",
]
