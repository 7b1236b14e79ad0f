"""
Explanation Generator

Turns an engine decision into deterministic, human readable text. Output
depends only on the winning rule, the observation and the numbers that
produced the decision, so identical inputs always render identically.

Rule-specific wording lives in _RULE_TEMPLATES. Rules without a template
fall back to the rendered condition tree, so a new rule added to the
knowledge base still gets a meaningful explanation.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Sequence, TYPE_CHECKING

from .base import DiagnosticRule, Match, Observation
from .conditions import describe, top_level_terms

if TYPE_CHECKING:
    from .forward_chaining import InferenceResult


Template = Callable[[Observation], List[str]]


def _either(flag: bool, when_true: str, when_false: str) -> str:
    return when_true if flag else when_false


# ── Per-rule templates ───────────────────────────────────────────────────────
_RULE_TEMPLATES: Dict[str, Template] = {
    "TRAUMATIC_BRAIN_INJURY": lambda o: [
        "Recent trauma was reported AND severe seizures present",
        "Indicates critical brain injury with bleeding/swelling",
        "Highest priority - requires immediate neurosurgical intervention",
    ],
    "SPINAL_FRACTURE": lambda o: [
        "Recent trauma was reported AND complete paralysis present",
        "Suggests vertebral fracture with spinal cord compression",
        "Emergency spinal stabilization required",
    ],
    "GENERAL_TRAUMA": lambda o: [
        "Recent trauma was reported",
        "Trauma takes precedence over all non-trauma conditions",
        "Requires immediate trauma assessment",
    ],
    "SADDLE_THROMBUS": lambda o: [
        f"Mobility is {o.get('mobility_status')} AND",
        "Pain signs are present AND",
        "Limbs feel cold to touch",
        "This triad is classic for aortic thromboembolism",
    ],
    "ACUTE_TOXICITY": lambda o: [
        "Onset is sudden AND",
        "Severe seizures are present AND",
        "Eye signs (dilated pupils/twitching) are present",
        "This triad suggests acute neurotoxicity",
    ],
    "HYPOGLYCEMIA": lambda o: [
        f"Patient is a kitten ({o.get('age_group')}) AND",
        "Onset is sudden AND",
        f"Seizures are present ({o.get('seizures')})",
        "This pattern suggests severe hypoglycemia",
    ],
    "THIAMINE_DEFICIENCY": lambda o: [
        "Neck flexion (curling) is present",
        "This is pathognomonic for thiamine deficiency",
        "Often caused by raw fish diets containing thiaminase",
    ],
    "HYPERTENSION": lambda o: [
        f"Patient is senior ({o.get('age_group')}) AND",
        "Onset is sudden AND",
        _either(o.get("seizures") == "mild", "Mild seizures present", "Eye signs present") + " AND",
        "Mobility remains normal",
        "Classic pattern for hypertensive crisis",
    ],
    "NEURO_FIP": lambda o: [
        f"Patient is a kitten ({o.get('age_group')}) AND",
        "Onset is gradual AND",
        _either(o.get("mobility_status") == "wobbly", "Mobility is wobbly", "Mild seizures present"),
        "This pattern is classic for neurological FIP in young cats",
    ],
    "BRAIN_TUMOR_MENINGIOMA": lambda o: [
        f"Patient is senior ({o.get('age_group')}) AND",
        "Onset is gradual AND",
        "Mild seizures are present",
        "This pattern suggests benign brain tumor (meningioma)",
    ],
    "HIGH_GRADE_BRAIN_TUMOR": lambda o: [
        f"Patient is senior ({o.get('age_group')}) AND",
        "Onset is gradual AND",
        "Severe seizures are present",
        "This pattern suggests aggressive brain malignancy",
    ],
    "SPINAL_TUMOR_LYMPHOMA": lambda o: [
        f"Patient is senior ({o.get('age_group')}) AND",
        "Mobility is paralyzed AND",
        "Onset is gradual",
        "This pattern suggests spinal lymphoma",
    ],
    "IVDD": lambda o: [
        "Pain signs are present AND",
        f"Mobility is abnormal ({o.get('mobility_status')}) AND",
        "Onset is sudden",
        "This combination suggests acute disc herniation",
    ],
    "IDIOPATHIC_EPILEPSY": lambda o: [
        f"Patient is adult ({o.get('age_group')}) AND",
        "Severe seizures are present AND",
        "Mobility remains normal",
        "Primary seizure disorder after ruling out other causes",
    ],
    "DIABETIC_NEUROPATHY": lambda o: [
        f"Patient is senior ({o.get('age_group')}) AND",
        "Mobility is wobbly AND",
        "Onset is gradual",
        "This pattern suggests diabetic neuropathy (plantigrade stance)",
    ],
    "OTITIS_INTERNA": lambda o: [
        "Ear issues are present AND",
        _either(o.get("head_tilt"), "Head tilt present", "Wobbly mobility present"),
        "This suggests inner ear infection affecting balance",
    ],
    "IDIOPATHIC_VESTIBULAR": lambda o: [
        "Onset is sudden AND",
        _either(o.get("head_tilt"), "Head tilt present", "Eye signs present") + " AND",
        "Mobility is wobbly",
        "Classic pattern for sudden vestibular dysfunction",
    ],
    "COGNITIVE_DYSFUNCTION": lambda o: [
        f"Patient is senior ({o.get('age_group')}) AND",
        "Onset is gradual AND",
        "No seizures present",
        "Age-related cognitive decline pattern",
    ],
}


def _capitalise(text: str) -> str:
    return text[:1].upper() + text[1:]


def _default_lines(rule: DiagnosticRule) -> List[str]:
    terms = top_level_terms(rule.condition)
    lines = []
    for i, term in enumerate(terms):
        suffix = " AND" if i < len(terms) - 1 else ""
        lines.append(_capitalise(describe(term)) + suffix)
    lines.append(f"Clinical pattern matches rule criteria for {rule.name}")
    return lines


def rule_rationale(rule: DiagnosticRule, observation: Observation, total_rules: int) -> List[str]:
    """Bullet lines stating why `rule` matched `observation`."""
    if rule.is_catch_all:
        return [
            "No specific diagnostic pattern matched",
            f"All {total_rules - 1} higher priority rules were evaluated",
            "Further diagnostic workup recommended",
        ]
    template = _RULE_TEMPLATES.get(rule.id)
    if template is None:
        return _default_lines(rule)
    return template(observation)


def explain_waterfall(
    winner: Match,
    observation: Observation,
    matches: Sequence[Match],
    total_rules: int,
    max_priority: int,
) -> str:
    """
    Explanation for the weighted waterfall decision.

    Sections, in order: header, rationale, score breakdown, alternatives.
    `matches` is the full score-sorted match list including the winner.
    """
    rule = winner.rule
    lines = [
        "Weighted Waterfall Result:",
        "",
        f"SELECTED DIAGNOSIS: {rule.name}",
        f"Priority Level: {rule.priority} of {max_priority}",
        f"Total Rules Evaluated: {total_rules} (all rules checked)",
        f"Total Matches Found: {len(matches)}",
        "",
        "Why this diagnosis was selected:",
    ]
    lines += [f"  • {line}" for line in rule_rationale(rule, observation, total_rules)]

    lines += ["", f"Score: {winner.score.total}"]
    lines += [f"  • {reason}" for reason in winner.score.reasons]

    alternatives = [m for m in matches if m is not winner]
    lines += ["", "Alternatives considered:"]
    if alternatives:
        for i, alt in enumerate(alternatives, start=1):
            lines.append(
                f"  {i}. {alt.rule.name} (priority {alt.priority}, score {alt.score.total})"
            )
    else:
        lines.append("  none")

    return "\n".join(lines)


def _inference_header(result: "InferenceResult") -> List[str]:
    return [
        "Inference Method: Forward Chaining",
        f"Iterations Required: {result.iterations}",
        "",
        "Inference Process:",
        f"1. Started with {len(result.initial_facts)} initial facts from user input",
        f"2. Applied {len(result.applied)} inference rules",
        f"3. Derived {len(result.facts)} total facts",
    ]


def explain_forward_chaining(
    rule: DiagnosticRule,
    result: "InferenceResult",
    confidence: float,
) -> str:
    """Explanation for a forward-chaining decision with a derived diagnosis."""
    lines = [
        "Forward Chaining Inference Result:",
        "",
        f"DIAGNOSIS: {rule.name}",
        f"Priority Level: {rule.priority}",
    ]
    lines += _inference_header(result)
    lines += ["4. Selected highest confidence diagnosis", "", "Applied Rules:"]
    for i, applied in enumerate(result.applied, start=1):
        lines.append(f"  {i}. {applied.rule.name} (Iteration {applied.iteration})")

    lines += [
        "",
        "Why this diagnosis was selected:",
        f"  • Forward chaining derived the fact: diagnosis_{rule.id.lower()}",
        f"  • This diagnosis has confidence level: {confidence}",
        "  • Rule conditions were satisfied through inference chain",
        "",
        "Final Facts:",
        "  " + ", ".join(result.facts),
    ]
    return "\n".join(lines)


def explain_undetermined(result: "InferenceResult") -> str:
    """Explanation when no diagnosis fact was derived."""
    lines = [
        "Forward Chaining Inference Result:",
        "",
        "RESULT: No Specific Diagnosis Determined",
    ]
    lines += _inference_header(result)
    lines += ["4. No specific diagnostic conclusion reached", "", "Facts Derived:"]
    lines += [f"  • {fact}" for fact in result.facts if not fact.startswith("diagnosis_")]
    lines += ["", "Recommendation: Further evaluation needed for definitive diagnosis"]
    return "\n".join(lines)
