"""
Protocol text export.

Renders a ProtocolPair as the plain-text summary that gets copied into
lab orders and supplier correspondence.
"""

from shared.schemas.protocol import ProtocolPair


def _money(value: float) -> str:
    return f"${value:,.0f}"


def format_protocol_text(pair: ProtocolPair) -> str:
    """Plain-text rendering of both protocols."""
    aql = pair.aql_protocol
    color_size = pair.color_size_protocol

    lines = [
        "ISOTOPIC TESTING PROTOCOL 1 (AQL-Based)",
        "",
        f"Lot: {aql.lot_size} units | AQL {aql.aql} | {aql.confidence_level}% Confidence",
        f"Samples: {aql.total_samples} ({aql.samples_per_color}/color x {aql.colors} colors)",
        f"Pooling: {aql.pooling.pools} pools -> {aql.pooling.tests_required} expected tests",
        f"Cost: {_money(aql.cost.pooled)} ({aql.pooling.savings_percent}% savings)",
        f"Power: {aql.power}%",
        (
            f"Decision: <={aql.decision_thresholds.accept} accept / "
            f">={aql.decision_thresholds.reject} reject"
        ),
        "",
        "---",
        "",
        "PROTOCOL 2 (Color x Size Based)",
        "",
        color_size.description,
        f"Total Samples: {color_size.samples}",
        f"Pooling: {color_size.pooling.pools} pools -> {color_size.pooling.tests_required} tests",
        (
            f"Cost: {_money(color_size.cost.pooled)} "
            f"({color_size.pooling.savings_percent}% savings)"
        ),
    ]
    return "\n".join(lines)
