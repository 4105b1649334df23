from typing import Iterable, List, Optional, Union

from fraudsim.records import Action, RiskLevel, TransactionRecord

ALL = "all"


def _matches(value, selected: Optional[Union[str, RiskLevel, Action]]) -> bool:
    if selected is None or selected == ALL:
        return True
    return value == selected


def filter_transactions(records: Iterable[TransactionRecord],
                        risk_level: Union[str, RiskLevel] = ALL,
                        action: Union[str, Action] = ALL,
                        limit: Optional[int] = None) -> List[TransactionRecord]:
    """
    Display filter for the risk monitor list.

    Takes records and the two categorical selections only, never the economic
    parameters, so it cannot influence the metrics engine. Input order is kept.
    """
    if isinstance(risk_level, str) and risk_level != ALL:
        risk_level = RiskLevel.parse(risk_level)
    if isinstance(action, str) and action != ALL:
        action = Action.parse(action)

    selected = [r for r in records if _matches(r.risk_level, risk_level) and _matches(r.action, action)]
    if limit is not None:
        selected = selected[:max(0, limit)]
    return selected
