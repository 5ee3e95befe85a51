"""
Derived Metrics
===============

Values the server computes from a reading instead of trusting the device.

Author: Sensor Data Collector Team
"""

# Tag thresholds used by the query API
HIGH_TEMPERATURE_C = 25.0
LOW_TEMPERATURE_C = 18.0
HIGH_CO2_PPM = 1000.0


def compute_indoor_td(temp: float, rh: float) -> float:
    """
    Approximate indoor dew point.

    Uses the rule of thumb Td = T - ((100 - RH) / 5). It is only close to the
    real dew point above roughly 50 % RH, which is fine for an indoor trend line.

    Args:
        temp: Temperature in °C
        rh: Relative humidity in % (0-100)

    Returns:
        Approximate dew point in °C
    """
    return temp - ((100 - rh) / 5)


def derive_tags(temp: float, co2: float) -> list[str]:
    """
    Label a reading for the dashboard.

    Returns:
        Zero or more of: "high-temperature", "low-temperature", "high-co2"
    """
    tags = []
    if temp > HIGH_TEMPERATURE_C:
        tags.append("high-temperature")
    elif temp < LOW_TEMPERATURE_C:
        tags.append("low-temperature")

    if co2 > HIGH_CO2_PPM:
        tags.append("high-co2")
    return tags
