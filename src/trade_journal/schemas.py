"""Stored record schemas and conversion into engine types."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from trade_journal.errors import RecordError
from trade_journal.types import ChecklistItem, ChecklistSection, Trade

_DIRECTIONS = {"LONG": "LONG", "BUY": "LONG", "SHORT": "SHORT", "SELL": "SHORT"}


class TradeRecord(BaseModel):
    """A trade as stored by the journal application.

    Accepts both the snake_case rows of the hosted database and the camelCase
    records kept in browser storage.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    symbol: str = Field(
        default="",
        validation_alias=AliasChoices("symbol", "currency_pair", "currencyPair"),
    )
    direction: Literal["LONG", "SHORT"] = Field(
        default="LONG",
        validation_alias=AliasChoices("direction", "type"),
    )
    status: str = "BEFORE"
    confluence_score: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        validation_alias=AliasChoices("confluence_score", "confluenceScore", "confluence"),
    )
    result: float | None = Field(default=None, validation_alias=AliasChoices("result", "pnl"))
    risk_amount: float | None = Field(
        default=None,
        validation_alias=AliasChoices("risk_amount", "riskAmount"),
    )
    created_at: datetime = Field(validation_alias=AliasChoices("created_at", "createdAt"))

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Ids may be stored as numbers."""
        return str(v) if isinstance(v, int) else v

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v: Any) -> Any:
        """Map ``Long``/``buy`` style labels onto LONG/SHORT."""
        if v is None:
            return "LONG"
        if isinstance(v, str):
            return _DIRECTIONS.get(v.strip().upper(), v)
        return v

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        """Statuses are compared upper-case; unknown values pass through."""
        if v is None:
            return "BEFORE"
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("result", "risk_amount", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Empty form strings mean unknown."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_trade(self) -> Trade:
        """Convert into the aggregator's trade type."""
        return Trade(
            id=self.id,
            symbol=self.symbol,
            direction=self.direction,
            status=self.status,
            created_at=self.created_at,
            confluence_score=self.confluence_score,
            result=self.result,
            risk_amount=self.risk_amount,
        )

    @classmethod
    def parse_trade(cls, payload: dict[str, Any]) -> Trade:
        """Validate one raw record into a trade. Raises RecordError."""
        try:
            return cls.model_validate(payload).to_trade()
        except ValidationError as exc:
            error = exc.errors()[0]
            location = ".".join(str(part) for part in error["loc"])
            raise RecordError(
                f"invalid_trade_record: {payload.get('id', '?')} {location}: {error['msg']}"
            ) from exc


class ChecklistItemRecord(BaseModel):
    """One checklist item definition."""

    model_config = ConfigDict(extra="ignore")

    id: str
    label: str
    points: int


class ChecklistSectionRecord(BaseModel):
    """One checklist section definition."""

    model_config = ConfigDict(extra="ignore")

    title: str
    items: list[ChecklistItemRecord] = Field(default_factory=list)

    def to_section(self) -> ChecklistSection:
        """Convert into the scorer's section type."""
        return ChecklistSection(
            title=self.title,
            items=tuple(ChecklistItem(id=i.id, label=i.label, points=i.points) for i in self.items),
        )


def parse_trades(payloads: list[dict[str, Any]]) -> list[Trade]:
    """Validate a list of raw records."""
    return [TradeRecord.parse_trade(payload) for payload in payloads]


def parse_checklist(payload: list[dict[str, Any]]) -> tuple[ChecklistSection, ...]:
    """Validate a checklist definition. Raises RecordError when malformed."""
    try:
        return tuple(ChecklistSectionRecord.model_validate(s).to_section() for s in payload)
    except ValidationError as exc:
        raise RecordError(f"invalid_checklist: {exc.errors()[0]['msg']}") from exc
