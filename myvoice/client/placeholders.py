"""Deterministic stand-ins shown when analysis or the voice report fails.

Both are clearly labeled as placeholders so nobody mistakes them for model
output. Scores derive from a hash of the demo id, so the same demo always
gets the same placeholder.
"""

from __future__ import annotations

from typing import Any, Mapping

PLACEHOLDER_DIMENSIONS = (
    "Breath control & support",
    "Tone quality & timbre",
    "Emotional delivery & storytelling",
    "Pitch & intonation",
    "Vocal technique (register balance / mixed voice)",
    "Rhythm & time feel",
    "Dynamics & control",
    "Diction & articulation",
    "Musical phrasing",
    "Style & genre awareness",
    "Vocal health & tension",
    "Professional readiness",
)

PLACEHOLDER_NOTE = (
    "Note: This is a placeholder analysis generated locally because the "
    "analysis service was unavailable."
)
REPORT_PLACEHOLDER_NOTE = (
    "Placeholder report generated locally because the voice report service was unavailable."
)


def hash_string(value: str) -> int:
    """31-multiplier string hash folded into 32 unsigned bits."""

    result = 0
    for char in value or "":
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    return result


def placeholder_scores(demo_id: str) -> list[float]:
    base = (hash_string(str(demo_id)) % 1000) / 1000
    scores = []
    for position in range(len(PLACEHOLDER_DIMENSIONS)):
        value = (base * 7.5 + position * 0.23) % 10
        scores.append(max(0.0, min(10.0, round(value, 1))))
    return scores


def build_placeholder_analysis(demo: Mapping[str, Any]) -> str:
    title = demo.get("name") or demo.get("audioFile") or "Untitled"
    scores = placeholder_scores(str(demo.get("id", "")))
    final_score = round(sum(scores) / len(scores), 1)

    lines = [f"Song: {title}", "", "Scores (0–10):"]
    lines.extend(f"- {dimension}: {score}" for dimension, score in zip(PLACEHOLDER_DIMENSIONS, scores))
    lines.extend(
        [
            "",
            f"Final score (avg): {final_score}",
            "",
            "Strengths (example):",
            "- Clear diction on sustained phrases; good vowel consistency on mid-range notes.",
            "- Solid rhythmic placement in steady sections; you land phrase endings confidently.",
            "",
            "Weaknesses (example):",
            "- Breath support fades in longer lines; consider quicker, quieter replenishment breaths.",
            "- Intonation drifts slightly in ascending passages; stabilize with lighter onset.",
            "",
            "Suggested exercises (weekly):",
            "- Straw phonation (3–5 mins): gentle slides from low to high to reduce tension.",
            "- Sirens on “ng” (5 mins): smooth register transitions; keep jaw relaxed.",
            "- Metronome vowels (5 mins): “ah/eh/ee” on 8th notes to lock time feel.",
            "",
            "References:",
            "- YouTube: search “straw phonation exercise singing”",
            "- Article: search “semi-occluded vocal tract exercises SOVT”",
            "",
            PLACEHOLDER_NOTE,
        ]
    )
    return "\n".join(lines)


def build_placeholder_voice_report() -> dict[str, str]:
    return {
        "talent": (
            f"{REPORT_PLACEHOLDER_NOTE}\n\n"
            "Your demos suggest a natural ear for melody and emotional expression. "
            "Pitch accuracy is generally good, with occasional deviations common among "
            "developing vocalists."
        ),
        "genre": (
            "Contemporary pop and indie-folk suit a warm, intimate voice, with room for "
            "R&B-influenced phrasing."
        ),
        "directionGo": (
            "Focus on emotionally driven acoustic pop, indie-folk and soft R&B, and consider "
            "writing original material."
        ),
        "directionAvoid": (
            "Avoid heavily processed electronic styles and extreme techniques such as "
            "screaming until your technique is conditioned for them."
        ),
        "similar": (
            "Phoebe Bridgers, Billie Eilish, Lorde, James Bay and Bon Iver share an intimate, "
            "emotionally direct delivery worth studying."
        ),
        "strengths": (
            "1. Emotional expression\n2. Pitch control in the mid-range\n3. Phrasing\n"
            "4. Warm tone quality\n5. Dynamic awareness"
        ),
        "weaknesses": (
            "1. Breath support\n2. Upper range\n3. Vocal runs\n4. Projection\n5. Consistency"
        ),
        "exercises": (
            "1. Lip trills (5 mins daily)\n2. Diaphragmatic breathing (5 mins daily)\n"
            "3. \"Mum\" scales (10 mins)\n4. Siren slides (5 mins)\n5. Song study (15 mins)\n\n"
            "Resources: search \"breath support exercises for singers\" and "
            "\"vocal warm-up routine\" on YouTube."
        ),
    }


__all__ = [
    "PLACEHOLDER_NOTE",
    "REPORT_PLACEHOLDER_NOTE",
    "build_placeholder_analysis",
    "build_placeholder_voice_report",
    "hash_string",
    "placeholder_scores",
]
