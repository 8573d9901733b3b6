"""Canned assistant replies — ordered keyword lookup with a default fallback."""

from __future__ import annotations

GREETING = (
    "Hello! I can help explain KPIs, graphs, threshold breaches, and safety"
    " insights. How can I help you today?"
)

DEFAULT_RESPONSE = (
    "I can provide insights on pressure, temperature, corrosion metrics, and"
    " threshold management. Ask me about any KPI or safety concern!"
)

# First matching keyword wins, so more specific topics come first.
_RESPONSES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("pressure",),
        "Max Pressure (psi) is the highest operating pressure in the pipe."
        " Readings at or above 1400 psi raise a warning, and 10% above that"
        " is critical.",
    ),
    (
        ("temperature", "temp"),
        "High temperatures accelerate corrosion, so temperature is tracked"
        " against upper and lower limits. Leaving the allowed band raises an"
        " alert.",
    ),
    (
        ("corrosion",),
        "Corrosion Impact is the percentage of material lost, derived from"
        " thickness loss and material properties. Values above 14% need"
        " immediate attention.",
    ),
    (
        ("threshold", "alert"),
        "Thresholds are safety limits per metric. When a reading crosses one,"
        " an alert opens, its recipients are notified, and the event is kept"
        " in the alert history.",
    ),
)


def respond(text: str) -> str:
    """Return the canned reply for the first keyword found in *text*."""
    lowered = text.lower()
    for keywords, response in _RESPONSES:
        if any(k in lowered for k in keywords):
            return response
    return DEFAULT_RESPONSE
