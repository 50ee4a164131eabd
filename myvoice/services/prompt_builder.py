"""Fixed prompt templates for single-demo analysis and the multi-demo report.

The analysis prompt asks for twelve scored dimensions plus a practice plan
in markdown. The report prompt asks for a strict JSON object with the eight
keys listed in ``REPORT_SECTIONS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

ANALYSIS_DIMENSIONS = (
    "Breath control & support",
    "Tone quality & timbre",
    "Emotional delivery & storytelling",
    "Pitch & intonation",
    "Vocal technique (register balance, chest/head voice quality, mixed voice use, etc.)",
    "Rhythm & time feel",
    "Dynamics & control",
    "Diction & articulation",
    "Musical phrasing",
    "Style & genre awareness",
    "Vocal health & tension",
    "Professional readiness",
)

NO_AUDIO_NOTE = "(Note: No audio was provided. Please provide a template analysis.)"

# Key -> instruction, in the order the report is rendered.
REPORT_SECTIONS = (
    (
        "talent",
        "Assessment of whether this person has vocal talent. Discuss their natural "
        "abilities, musicality, and potential. Be honest but encouraging.",
    ),
    (
        "genre",
        "Their general genre/style. What type of music does their voice naturally suit? "
        "Consider timbre, range, and stylistic tendencies.",
    ),
    (
        "directionGo",
        "The direction they SHOULD go. What genres, styles, or artistic paths would best "
        "showcase their voice? What collaborations or projects should they pursue?",
    ),
    (
        "directionAvoid",
        "The direction they should AVOID. What genres or styles might not suit their voice "
        "or could harm their vocal health?",
    ),
    (
        "similar",
        "Recommend 5-8 professional singers and their songs that have similar vocal "
        "qualities. Explain WHY each artist is relevant.",
    ),
    (
        "strengths",
        "Their top 5 vocal strengths with detailed explanations of how these manifest "
        "in their singing.",
    ),
    (
        "weaknesses",
        "Their top 5 areas for improvement with specific, constructive feedback.",
    ),
    (
        "exercises",
        "The most important weekly vocal exercises tailored to their specific needs. "
        "Include specific routines, durations, and external resources (YouTube search "
        "terms, article titles).",
    ),
)
REPORT_KEYS = tuple(key for key, _ in REPORT_SECTIONS)


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


def build_analysis_prompts(song_name: str) -> PromptBundle:
    system_prompt = " ".join(
        [
            "You are a professional vocal coach and music producer.",
            "Listen carefully to the audio provided and analyze the singer's vocal performance in detail.",
            "Base your analysis ONLY on what you actually hear in the audio.",
        ]
    )
    lines = [
        f"Song name: {song_name}",
        "",
        "Listen to this singing demo and provide a detailed vocal analysis across these "
        "dimensions (score each 0–10 and give detailed explanation to your scoring - "
        "100 words per dimension):",
        *(f"- {dimension}" for dimension in ANALYSIS_DIMENSIONS),
        "",
        "Then:",
        "1) Give a final score (average).",
        "2) List 3–5 vocal strengths and 3–5 weaknesses based on what you heard.",
        "3) Suggest a weekly practice plan with concrete exercises tailored to the issues you identified.",
        "4) For each exercise, include 1–2 external references (YouTube query terms or article titles).",
        "",
        "Output format: clean markdown with headings and bullet lists.",
    ]
    return PromptBundle(system_prompt=system_prompt, user_prompt="\n".join(lines))


def build_report_prompts(demo_names: Sequence[str]) -> PromptBundle:
    system_prompt = " ".join(
        [
            "You are a professional vocal coach, music producer, and talent scout with 20+ years of experience.",
            "You have analyzed thousands of singers and have a deep understanding of vocal "
            "development, genre suitability, and career guidance.",
            "Be encouraging but honest. Provide actionable, specific advice.",
        ]
    )
    lines = [
        f"I have analyzed {len(demo_names)} vocal demos from a singer. "
        f"The songs are: {', '.join(demo_names)}.",
        "",
        "Based on these performances, please provide a comprehensive voice report with the following sections.",
        "Each section should be approximately 200 words with detailed, specific explanations.",
        "",
        "Respond in JSON format with these exact keys:",
    ]
    for position, (key, instruction) in enumerate(REPORT_SECTIONS, start=1):
        lines.extend(["", f"{position}. '{key}': {instruction}"])
    lines.extend(["", "Return ONLY valid JSON, no markdown code blocks."])
    return PromptBundle(system_prompt=system_prompt, user_prompt="\n".join(lines))


__all__ = [
    "ANALYSIS_DIMENSIONS",
    "NO_AUDIO_NOTE",
    "PromptBundle",
    "REPORT_KEYS",
    "REPORT_SECTIONS",
    "build_analysis_prompts",
    "build_report_prompts",
]
