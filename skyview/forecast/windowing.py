"""Turn a 5-day forecast into the next-48-hour temperature chart series."""

from datetime import UTC, datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal

from skyview.models.weather import ChartPoint, ForecastSeries

WINDOW_HOURS = 48


def to_chart_series(
    forecast: ForecastSeries,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[ChartPoint]:
    """Keep entries in (now, now + 48h] and label them HH:MM.

    Input order is kept as-is. An empty result is valid and means there is
    nothing to chart.
    """
    if now is None:
        now = datetime.now(UTC)
    now_ts = now.timestamp()

    points: list[ChartPoint] = []
    for entry in forecast.entries:
        hours_ahead = (entry.timestamp - now_ts) / 3600
        if not 0 < hours_ahead <= WINDOW_HOURS:
            continue
        label = format_clock(entry.timestamp, tz)
        points.append(
            ChartPoint(
                time=label,
                temperature=round_temperature(entry.temperature),
                date=label,
            )
        )
    return points


def format_clock(epoch_seconds: int | float, tz: tzinfo | None = None) -> str:
    """24-hour HH:MM in ``tz`` (local zone when None)."""
    return datetime.fromtimestamp(epoch_seconds, UTC).astimezone(tz).strftime("%H:%M")


def round_temperature(value: float) -> float:
    """One decimal place, halves rounded away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
