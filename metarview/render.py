"""Human-readable and tabular rendering of a Briefing."""

from typing import List, Optional

from metarview.briefing import Briefing
from metarview.weather.models import DecodedReport, Minima, TrendResult, WindObservation


def render_text(briefing: Briefing) -> str:
    """
    Render every report, the raw TAF if any, and the trend as plain text.

    Example output:
        === METAR 1 ===
        KJFK 121251Z 20020KT 2SM BR OVC008
        Station: KJFK @ 121251Z
        - Wind: 200@20kt | headwind 18.8 kt, crosswind 6.8 kt from the left (OK <= 15 kt)
        - Visibility: 2.0 SM (BELOW 3 SM)
        - Ceiling: 800 ft OVC (BELOW 1000 ft)
        - Weather: mist
    """
    lines: List[str] = []
    for i, report in enumerate(briefing.reports):
        if i:
            lines.append("")
        lines.append(f"=== METAR {i + 1} ===")
        lines.append(briefing.raw_reports[i])
        if briefing.runway_heading is None:
            lines.append("(Tip: add --runway <mag heading> to compute crosswind)")
        lines.extend(_report_lines(report, briefing.minima, briefing.runway_heading))

    if briefing.taf_raw:
        lines.append("")
        lines.append("=== TAF (raw) ===")
        lines.append(briefing.taf_raw)

    trend = briefing.trend
    if trend is not None:
        lines.append("")
        lines.extend(_trend_lines(trend))
    return "\n".join(lines)


def render_json(briefing: Briefing, indent: int = 2) -> str:
    return briefing.to_json(indent=indent)


def render_csv(briefing: Briefing) -> str:
    """One CSV row per report, with the alerts raised against the briefing minima."""
    df = briefing.weather_query.to_dataframe()
    df['alerts'] = [';'.join(str(a) for a in briefing.alerts(r)) for r in briefing.reports]
    return df.to_csv(index=False)


def _report_lines(report: DecodedReport, minima: Minima, runway_heading: Optional[int]) -> List[str]:
    stamp = f" @ {report.timestamp}" if report.timestamp else ""
    lines = [f"Station: {report.station or 'N/A'}{stamp}"]
    lines.append(f"- Wind: {_wind_text(report, minima, runway_heading)}")

    if report.visibility_sm is not None:
        if report.visibility_sm < minima.min_visibility_sm:
            status = f"BELOW {minima.min_visibility_sm:g} SM"
        else:
            status = f"OK >= {minima.min_visibility_sm:g} SM"
        lines.append(f"- Visibility: {report.visibility_sm:.1f} SM ({status})")
    else:
        lines.append("- Visibility: N/A")

    if report.ceiling is not None:
        if report.ceiling.height_ft < minima.min_ceiling_ft:
            status = f"BELOW {minima.min_ceiling_ft:g} ft"
        else:
            status = f"OK >= {minima.min_ceiling_ft:g} ft"
        lines.append(f"- Ceiling: {report.ceiling.height_ft} ft {report.ceiling.layer} ({status})")
    else:
        lines.append("- Ceiling: No ceiling reported")

    if report.phenomena:
        lines.append(f"- Weather: {', '.join(report.phenomena)}")
    else:
        lines.append("- Weather: None significant")
    return lines


def _wind_text(report: DecodedReport, minima: Minima, runway_heading: Optional[int]) -> str:
    wind = report.wind
    if wind is None:
        return "N/A"
    if wind.is_variable:
        return f"VRB {wind.speed}kt{_gust(wind)} (variable direction)"

    text = f"{wind.direction:03d}@{wind.speed}kt{_gust(wind)}"
    components = report.wind_components(runway_heading)
    if components is None:
        return text + " | add --runway <mag heading> for crosswind calc"

    crosswind = abs(components.crosswind_kt)
    text += f" | headwind {components.headwind_kt:.1f} kt, crosswind {crosswind:.1f} kt"
    if components.crosswind_side:
        text += f" from the {components.crosswind_side}"
    if crosswind > minima.max_crosswind_kt:
        text += f" (EXCEEDS {minima.max_crosswind_kt:g} kt)"
    else:
        text += f" (OK <= {minima.max_crosswind_kt:g} kt)"
    return text


def _gust(wind: WindObservation) -> str:
    return f" G{wind.gust}" if wind.gust is not None else ""


def _trend_lines(trend: TrendResult) -> List[str]:
    lines = ["=== Trend (oldest -> latest) ==="]
    if trend.visibility is not None:
        v = trend.visibility
        lines.append(
            f"- Visibility: {v.classification.value} ({v.from_value:.1f} -> {v.to_value:.1f} SM)"
        )
    if trend.ceiling is not None:
        c = trend.ceiling
        lines.append(
            f"- Ceiling: {c.classification.value} ({c.from_value:g} -> {c.to_value:g} ft)"
        )
    if trend.wind_direction is not None:
        w = trend.wind_direction
        text = f"- Wind: {w.from_deg} -> {w.to_deg} deg"
        if w.delta:
            text += f" (shift {w.delta} deg)"
        lines.append(text)
    if trend.is_empty():
        lines.append("- No field reported in both the oldest and latest report")
    return lines
