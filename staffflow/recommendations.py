"""
Staffing recommendations built from rebalancing suggestions.

A `narrator` callable may be supplied to write the headline text (for
example a language-model client). It receives a prompt string and returns
a mapping with `title`, `description`, `priority` and `estimated_impact`.
If it is missing or fails, the rule-based text below is used instead.
"""
import logging
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from .rebalancer import RebalancingSuggestion

logger = logging.getLogger(__name__)

PRIORITIES = ('critical', 'high', 'medium', 'low')
TOP_SUGGESTIONS = 3
BALANCED_MESSAGE = "All staff are well-balanced. No rebalancing needed."


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    suggestions: Tuple[RebalancingSuggestion, ...]
    priority: str
    estimated_impact: str


def build_prompt(assignments, suggestions):
    overloaded = [a for a in assignments if a.is_overloaded]
    idle = [a for a in assignments if a.patient_count == 0]
    average = float(np.mean([a.utilization * 100 for a in assignments])) if assignments else 0.0

    lines = [
        "You are a hospital staffing optimization expert.",
        "",
        "CURRENT SITUATION:",
        f"- {len(overloaded)} nurses are OVERLOADED",
        f"- {len(idle)} nurses are IDLE (0 patients)",
        f"- Average utilization: {average:.1f}%",
        "",
        "OVERLOADED NURSES:",
    ]
    lines += [
        f"{a.staff_name} ({a.unit}): {a.patient_count} patients, "
        f"{a.workload}/{a.max_workload} workload ({a.utilization * 100:.0f}% capacity)"
        for a in overloaded
    ]
    lines += ["", "AVAILABLE PATIENT TRANSFERS:"]
    lines += [
        f"Move {s.patient_name} from {s.from_staff_name} to {s.to_staff_name}. "
        f"Skill match: {'Yes' if s.skill_match else 'No'}"
        for s in suggestions
    ]
    lines += ["", "Give one clear, actionable recommendation with title, description, "
                  "priority (critical/high/medium/low) and estimated impact."]
    return "\n".join(lines)


def _narrated(assignments, suggestions, narrator):
    reply = narrator(build_prompt(assignments, suggestions))
    priority = reply['priority']
    if priority not in PRIORITIES:
        raise ValueError(f"Unknown priority {priority!r}")
    return [Recommendation(
        title=reply['title'],
        description=reply['description'],
        suggestions=tuple(suggestions[:TOP_SUGGESTIONS]),
        priority=priority,
        estimated_impact=reply['estimated_impact'],
    )]


def rule_based_recommendations(assignments, suggestions) -> List[Recommendation]:
    overloaded_count = sum(1 for a in assignments if a.is_overloaded)
    if overloaded_count == 0:
        return []

    if overloaded_count >= 3:
        priority = 'critical'
    elif overloaded_count == 2:
        priority = 'high'
    else:
        priority = 'medium'

    matched = [s for s in suggestions if s.skill_match]
    top = (matched[:2] + [s for s in suggestions if s not in matched[:2]])[:TOP_SUGGESTIONS]

    worst = max(assignments, key=lambda a: a.utilization)
    pct = round(worst.utilization * 100)
    plural = 's' if overloaded_count > 1 else ''
    others = ''
    if overloaded_count > 1:
        rest = overloaded_count - 1
        others = f" {rest} other nurse{'s are' if rest > 1 else ' is'} also overloaded."

    return [Recommendation(
        title=f"URGENT: Rebalance {overloaded_count} Overloaded Nurse{plural}",
        description=(
            f"Critical staffing imbalance detected. {worst.staff_name} is at {pct}% capacity "
            f"with {worst.patient_count} patients (max: {worst.max_patients}).{others} "
            "Immediate patient reassignment needed to prevent burnout and ensure patient safety."
        ),
        suggestions=tuple(top),
        priority=priority,
        estimated_impact=(
            f"Reduces {worst.staff_name}'s workload from {pct}% to ~{max(70, pct - 30)}% capacity. "
            "Brings all nurses within safe patient-to-staff ratios (target: 70-90% utilization)."
        ),
    )]


def generate_recommendations(assignments, suggestions, narrator=None):
    if not suggestions:
        return []
    if narrator is not None:
        try:
            return _narrated(assignments, suggestions, narrator)
        except Exception:
            logger.warning("Narrator failed, using rule-based recommendations", exc_info=True)
    return rule_based_recommendations(assignments, suggestions)


def format_recommendations(recommendations):
    if not recommendations:
        return BALANCED_MESSAGE
    blocks = []
    for rec in recommendations:
        actions = "\n".join(
            f"- Move {s.patient_name} from {s.from_staff_name} to {s.to_staff_name}"
            for s in rec.suggestions
        )
        blocks.append(
            f"**{rec.title}** [{rec.priority.upper()}]\n"
            f"{rec.description}\n\n"
            f"Expected Impact: {rec.estimated_impact}\n\n"
            f"Suggested Actions:\n{actions}"
        )
    return "\n---\n".join(blocks)
