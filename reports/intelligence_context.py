"""
Plain-text rendering of an IntelligenceReport for the response layer's prompt.
Deterministic: the same report always renders to the same text.
"""

from typing import List

from analysis.intelligence_engine import IntelligenceReport

SECTION_RULE = '═══'
MAX_CONNECTIONS = 10


def _section(title: str, lines: List[str]) -> str:
    return f"\n\n{SECTION_RULE} {title} {SECTION_RULE}\n" + ''.join(f"{line}\n" for line in lines)


def render_intelligence_context(report: IntelligenceReport) -> str:
    """
    Render the report as labeled text sections.

    Empty sections are omitted; the confidence section is always present.
    """
    sections = []

    if report.missing_data:
        sections.append(_section(
            'DATA GAPS IDENTIFIED',
            [f"- {gap.message}" for gap in report.missing_data],
        ))

    pattern_lines = []
    for pattern in report.temporal_patterns.values():
        pattern_lines.append(f"- {pattern.message}")
        pattern_lines.extend(f"  • {insight.message}" for insight in pattern.insights)
    if report.sentiment_trend and report.sentiment_trend.has_comparison:
        pattern_lines.append(f"- Sentiment Analysis: {report.sentiment_trend.message}")
        pattern_lines.extend(f"  • {insight}" for insight in report.sentiment_trend.insights)
    pattern_lines.extend(f"- {anomaly.message}" for anomaly in report.anomalies)
    pattern_lines.extend(f"- {finding.message}" for finding in report.validations)
    if pattern_lines:
        sections.append(_section('PATTERNS & ANOMALIES', pattern_lines))

    if report.sentiments:
        sections.append(_section('MANAGEMENT SENTIMENT', [
            f"- {s.message} ({s.scores.positive_pct:.1f}% positive, "
            f"{s.scores.negative_pct:.1f}% negative)"
            for s in report.sentiments
        ]))

    if report.peer_comparisons:
        peer_lines = []
        for comparison in report.peer_comparisons:
            peer_lines.append(f"- {comparison.message}")
            peer_lines.extend(f"  • {insight}" for insight in comparison.insights)
        sections.append(_section('PEER COMPARISON', peer_lines))

    if report.causal_candidates:
        sections.append(_section('TIMELINE LINKS', [
            f"- {c.event} ({c.event_date.date().isoformat()}) -> {c.outcome} "
            f"({c.outcome_date.date().isoformat()}), {c.days_later} days later, "
            f"{c.confidence.value.lower()} confidence"
            for c in report.causal_candidates
        ]))

    if report.entity_graph and report.entity_graph.connections:
        sections.append(_section('ENTITY RELATIONSHIPS', [
            f"- {c.from_ticker} mentions {c.to_ticker} ({c.source})"
            for c in report.entity_graph.connections[:MAX_CONNECTIONS]
        ]))

    confidence = report.confidence
    confidence_lines = [f"- Score: {confidence.score}/100 ({confidence.level.value})"]
    confidence_lines.extend(f"- {w}" for w in confidence.warnings)
    sections.append(_section('CONFIDENCE', confidence_lines))

    if report.follow_ups:
        sections.append(_section(
            'SUGGESTED FOLLOW-UPS',
            [f"- {question}" for question in report.follow_ups],
        ))

    return ''.join(sections)
