from storypoints.schemas.score_breakdown import ScoreBreakdown
from storypoints.services.estimator import COMPLEXITY_WEIGHTS, SCOPE_WEIGHTS


def _pts(n: int | None) -> str:
    if n is None:
        return "_-_"
    return f"**{n}** {'point' if n == 1 else 'points'}"


def _keywords(words: list[str]) -> str:
    return ", ".join(f"`{w}`" for w in words) or "_-_"


def summarize_breakdown(b: ScoreBreakdown) -> str:
    rows = [f"| Base ({b.base_points_reason}) | {b.base_points:+d} | - |"]
    for tier, weight in COMPLEXITY_WEIGHTS.items():
        matched = getattr(b.complexity_details, tier)
        rows.append(f"| Complexity: {tier} | {weight * len(matched):+d} | {_keywords(matched)} |")
    for tier, weight in SCOPE_WEIGHTS.items():
        matched = getattr(b.scope_details, tier)
        rows.append(f"| Scope: {tier} | {weight * len(matched):+d} | {_keywords(matched)} |")
    rows += [
        f"| Dependencies | {b.dependency_score:+d} | {_keywords(b.dependency_details.keywords)} |",
        f"| Length ({b.length_details.character_count} chars) | {b.length_score:+d} | - |",
    ]
    return (
        "| Component | Score | Matched keywords |\n|---|---|---|\n"
        + "\n".join(rows)
        + f"\n\nTotal: **{b.total_score}**, clamped to {b.fibonacci_mapping.original_score}, "
        f"mapped to **{b.final_points}**. {b.fibonacci_mapping.reason}."
    )


def build_report(state: dict) -> str:
    breakdown = state.get("breakdown")
    estimates = [
        f"- Rule-based: {_pts(state.get('rule_points'))}",
        f"- Machine learning: {_pts(state.get('ml_points'))}",
    ]
    if state.get("ai_model"):
        ai_line = f"- AI ({state['ai_model']}): {_pts(state.get('ai_points'))}"
        if state.get("ai_note"):
            ai_line += f" _({state['ai_note']})_"
        estimates.append(ai_line)
    if state.get("use_bert"):
        confidence = state.get("bert_confidence")
        bert_line = f"- BERT: {_pts(state.get('bert_points'))}"
        if confidence is not None:
            bert_line += f" (confidence {confidence:.0%})"
        estimates.append(bert_line)

    errors = state.get("errors") or []
    err_block = "\n> **Errors/Warnings**:\n" + "\n".join(f"> - {e}" for e in errors) if errors else ""

    return (
        f"# Story Point Estimate\n\n"
        f"**Task**: *{state.get('title') or '?'}* · `{state.get('task_type', '?')}`\n\n"
        f"## Suggested Points\n{_pts(state.get('final_points'))} (source: {state.get('final_source', 'rule')})\n\n"
        f"## Estimates\n" + "\n".join(estimates) + "\n\n"
        f"## Rule-Based Breakdown\n{summarize_breakdown(breakdown) if breakdown else '_-_'}\n"
        f"{err_block}\n---\n*Auto-generated report.*"
    )
