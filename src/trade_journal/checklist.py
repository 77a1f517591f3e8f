"""Weighted confluence checklist scoring."""

from __future__ import annotations

from typing import Mapping, Sequence

from trade_journal.errors import ContractViolationError
from trade_journal.types import ChecklistItem, ChecklistScore, ChecklistSection, SectionScore
from trade_journal.utils.logging import get_logger, log_contract_violation
from trade_journal.utils.numbers import round_half_up

logger = get_logger("trade_journal.checklist")


def _section(title: str, *items: tuple[str, str, int]) -> ChecklistSection:
    return ChecklistSection(
        title=title,
        items=tuple(ChecklistItem(id=i, label=label, points=points) for i, label, points in items),
    )


DEFAULT_CHECKLIST: tuple[ChecklistSection, ...] = (
    _section(
        "Weekly",
        ("weekly-trend", "Trend", 10),
        ("weekly-aoi", "At AOI / Rejected", 10),
        ("weekly-ema", "Touching EMA", 5),
        ("weekly-psych", "Round Psychological Level", 5),
        ("weekly-structure", "Rejection from Previous Structure", 10),
        ("weekly-candle", "Candlestick Rejection from AOI", 10),
        ("weekly-break", "Break & Retest / Head & Shoulders", 10),
    ),
    _section(
        "Daily",
        ("daily-trend", "Trend", 10),
        ("daily-aoi", "At AOI / Rejected", 10),
        ("daily-ema", "Touching EMA", 5),
        ("daily-psych", "Round Psychological Level", 5),
        ("daily-structure", "Rejection from Previous Structure", 10),
        ("daily-candle", "Candlestick Rejection from AOI", 10),
        ("daily-break", "Break & Retest", 10),
    ),
    _section(
        "4H",
        ("4h-trend", "Trend", 5),
        ("4h-aoi", "At AOI / Rejected", 5),
        ("4h-ema", "Touching EMA", 5),
        ("4h-psych", "Round Psychological Level", 5),
        ("4h-structure", "Rejection from Previous Structure", 10),
        ("4h-candle", "Candlestick Rejection from AOI", 5),
        ("4h-break", "Break & Retest", 10),
    ),
    _section(
        "2H/1H/30m",
        ("lower-trend", "Trend", 5),
        ("lower-ema", "Touching EMA", 5),
        ("lower-break", "Break & Retest", 5),
    ),
    _section(
        "Entry Signal",
        ("entry-sos", "SOS", 10),
        ("entry-engulfing", "Engulfing candlestick", 10),
    ),
    _section(
        "Risk Management",
        ("risk-stop", "Stop Loss", 10),
        ("risk-take", "Take Profit", 10),
    ),
)


def _percentage(achieved: int, possible: int) -> int:
    if possible <= 0:
        return 0
    return int(round_half_up(achieved / possible * 100.0))


def score(
    sections: Sequence[ChecklistSection],
    selections: Mapping[str, bool],
) -> ChecklistScore:
    """Score a checklist selection per section and overall.

    Items missing from ``selections`` count as unselected. Negative point
    values raise ContractViolationError.
    """
    result = ChecklistScore()
    for section in sections:
        achieved = 0
        possible = 0
        for item in section.items:
            if item.points < 0:
                log_contract_violation(
                    logger,
                    reason="negative_checklist_points",
                    item_id=item.id,
                    points=item.points,
                )
                raise ContractViolationError(f"negative_checklist_points: {item.id}")
            possible += item.points
            if selections.get(item.id, False):
                achieved += item.points
        result.sections.append(
            SectionScore(
                title=section.title,
                achieved=achieved,
                possible=possible,
                percentage=_percentage(achieved, possible),
            )
        )
        result.achieved += achieved
        result.possible += possible

    result.overall_percentage = _percentage(result.achieved, result.possible)
    return result


def select_all(sections: Sequence[ChecklistSection]) -> dict[str, bool]:
    """Selection map with every item ticked."""
    return {item.id: True for section in sections for item in section.items}
