"""
Sentiment classification and fusion rules.
"""

from decimal import Decimal

from pricesignal.schemas.signal import SentimentSignal


def classify_fear_greed(value: Decimal) -> str:
    """Fear & Greed label for a 0-100 index value."""
    if value <= 25:
        return "Extreme Fear"
    if value <= 45:
        return "Fear"
    if value <= 55:
        return "Neutral"
    if value <= 75:
        return "Greed"
    return "Extreme Greed"


FEAR_GREED_DESCRIPTIONS = {
    "Extreme Fear": "Extreme fear in the market - possible buying opportunity",
    "Fear": "Fear in the market - buy with caution",
    "Neutral": "Market is neutral - technical analysis matters most",
    "Greed": "Greed in the market - sell with caution",
    "Extreme Greed": "Extreme greed in the market - possible selling opportunity",
}
SENTIMENT_UNAVAILABLE = "Market sentiment data unavailable"
HIGH_NETWORK_ACTIVITY = 900_000


def describe_fear_greed(value: Decimal) -> str:
    return FEAR_GREED_DESCRIPTIONS[classify_fear_greed(value)]


def describe_sentiment(label: str) -> str:
    return f"Overall social media sentiment is {label.lower()}."


def describe_onchain(whale_movement: str, flow_direction: str, active_addresses: int) -> str:
    activity = "High" if active_addresses > HIGH_NETWORK_ACTIVITY else "Normal"
    return (
        f"Whale movement: {whale_movement}, exchange flow: {flow_direction}, "
        f"network activity: {activity}"
    )


def classify_sentiment(value: Decimal) -> str:
    """Social sentiment label for a 0-1 score."""
    if value > Decimal("0.6"):
        return "Bullish"
    if value < Decimal("0.4"):
        return "Bearish"
    return "Neutral"


def classify_whale_movement(whale_transactions: int) -> str:
    if whale_transactions > 80:
        return "Accumulation"
    if whale_transactions < 30:
        return "Distribution"
    return "Neutral"


def classify_flow(net_flow: int) -> str:
    """Exchange flow label for outflow minus inflow."""
    if net_flow > 500:
        return "Outflow"
    if net_flow < -500:
        return "Inflow"
    return "Neutral"


def generate_sentiment_signal(
    fear_greed_value: Decimal,
    sentiment_value: Decimal,
    whale_movement: str,
    flow_direction: str,
) -> SentimentSignal:
    """
    Fuse sentiment inputs into BULLISH / BEARISH / NEUTRAL.

    Extreme fear counts double as bullish (contrarian), extreme greed
    double as bearish.
    """
    bullish = 0
    bearish = 0

    if fear_greed_value <= 25:
        bullish += 2
    elif fear_greed_value >= 75:
        bearish += 2

    if sentiment_value > Decimal("0.6"):
        bullish += 1
    elif sentiment_value < Decimal("0.4"):
        bearish += 1

    if whale_movement == "Accumulation":
        bullish += 1
    elif whale_movement == "Distribution":
        bearish += 1

    if flow_direction == "Inflow":
        bullish += 1
    elif flow_direction == "Outflow":
        bearish += 1

    if bullish > bearish:
        return SentimentSignal.BULLISH
    if bearish > bullish:
        return SentimentSignal.BEARISH
    return SentimentSignal.NEUTRAL
