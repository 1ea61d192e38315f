"""Paper-position simulation for a recommendation against a live price."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from signal_engine.models.analysis import PositionType, Recommendation
from signal_engine.models.config import EngineConfig


class PositionSimulation(BaseModel):
    """Unrealised result of a simulated leveraged position."""

    model_config = ConfigDict(frozen=True)

    position_type: PositionType
    notional: Decimal
    pnl: Decimal
    pnl_percent: Decimal
    distance_to_tp: Decimal  # % of current price still to travel to target
    distance_to_sl: Decimal  # % of current price left before the stop


def simulate_position(
    recommendation: Recommendation,
    current_price: Decimal,
    config: EngineConfig | None = None,
) -> PositionSimulation | None:
    """
    Mark a recommended position to the current price.

    Notional = position_size * leverage from the config.

    Args:
        recommendation: BUY or SELL recommendation with price levels
        current_price: Latest traded price (must be positive)
        config: Supplies position size and leverage

    Returns:
        PositionSimulation, or None for HOLD or a recommendation
        without price levels
    """
    cfg = config or EngineConfig()
    entry = recommendation.entry_price
    stop = recommendation.stop_loss
    target = recommendation.take_profit

    if recommendation.position_type == PositionType.HOLD:
        return None
    if entry is None or stop is None or target is None or not entry or not current_price:
        return None

    notional = cfg.position_size * cfg.leverage

    if recommendation.position_type == PositionType.BUY:
        move = (current_price - entry) / entry
        distance_to_tp = (target - current_price) / current_price * 100
        distance_to_sl = (current_price - stop) / current_price * 100
    else:
        move = (entry - current_price) / entry
        distance_to_tp = (current_price - target) / current_price * 100
        distance_to_sl = (stop - current_price) / current_price * 100

    return PositionSimulation(
        position_type=recommendation.position_type,
        notional=notional,
        pnl=notional * move,
        pnl_percent=move * 100,
        distance_to_tp=distance_to_tp,
        distance_to_sl=distance_to_sl,
    )
