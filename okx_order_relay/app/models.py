"""Domain models for the signal-to-order translation."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


INSTRUMENT_SUFFIX = "-SWAP"
MARKET_ON_TRIGGER = "-1"


class SignalValidationError(ValueError):
    def __init__(self) -> None:
        super().__init__("Missing required fields: signal.ticker and signal.side")


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, raw: str) -> Side:
        """Only an exact (case-insensitive) "buy" is BUY; every other value falls through to SELL."""
        return cls.BUY if raw.lower() == cls.BUY.value else cls.SELL

    @property
    def pos_side(self) -> str:
        return "long" if self is Side.BUY else "short"


@dataclass(slots=True, frozen=True)
class Signal:
    ticker: str
    side: str
    stop_loss: Any = None
    target: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> Signal:
        """Extract the signal from a request body such as {"signal": {...}}."""
        signal = payload.get("signal") if isinstance(payload, dict) else None
        if not isinstance(signal, dict) or not signal.get("ticker") or not signal.get("side"):
            raise SignalValidationError()
        return cls(
            ticker=signal["ticker"],
            side=signal["side"],
            stop_loss=signal.get("stopLoss"),
            target=signal.get("target"),
        )

    @property
    def has_protection(self) -> bool:
        return bool(self.stop_loss) or bool(self.target)


def _number_str(value: float) -> str:
    """Shortest round-trip digits, plain notation for 1e-7 < |value| < 1e21."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = f"{digits[:n]}.{digits[n:]}"
    elif -6 < n <= 0:
        text = "0." + "0" * -n + digits
    else:
        mantissa = digits[0] + (f".{digits[1:]}" if k > 1 else "")
        text = f"{mantissa}e{'+' if n > 0 else '-'}{abs(n - 1)}"
    return sign + text


def price_str(value: Any) -> str:
    """Render a trigger price the way it appears as a JSON literal."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) or (isinstance(value, int) and abs(value) >= 10**21):
        return _number_str(float(value))
    return str(value)


def _algo_leg(value: Any) -> tuple[str, str]:
    if value:
        return price_str(value), MARKET_ON_TRIGGER
    return "", ""


def build_attached_algo_order(signal: Signal) -> dict[str, str]:
    """One combined SL/TP object; an unset leg is sent as empty strings."""
    sl_trigger, sl_ord = _algo_leg(signal.stop_loss)
    tp_trigger, tp_ord = _algo_leg(signal.target)
    return {
        "tpTriggerPxType": "last",
        "slTriggerPxType": "last",
        "slTriggerPx": sl_trigger,
        "slOrdPx": sl_ord,
        "tpTriggerPx": tp_trigger,
        "tpOrdPx": tp_ord,
    }


def build_order_body(signal: Signal) -> dict[str, Any]:
    """Market order of size 1 in cross margin, key order fixed for signing."""
    if not isinstance(signal.side, str):
        raise TypeError(f"signal.side must be a string, got {type(signal.side).__name__}")
    side = signal.side.lower()
    body: dict[str, Any] = {
        "instId": f"{signal.ticker}{INSTRUMENT_SUFFIX}",
        "tdMode": "cross",
        "side": side,
        "posSide": Side.parse(side).pos_side,
        "ordType": "market",
        "sz": "1",
    }
    if signal.has_protection:
        body["attachAlgoOrds"] = [build_attached_algo_order(signal)]
    return body
