from __future__ import annotations

from typing import Sequence

from storage.base import MessageRecord, Role


REFUSAL_REPLY = "Sorry, I don't have information about that."

GROUNDING_PROMPT = (
    "You are a support assistant. Answer ONLY based on the provided documentation below.\n"
    f'If the answer is not in the documentation, you MUST respond with: "{REFUSAL_REPLY}"\n'
    "Do not make up information or answer from general knowledge.\n"
    "\n"
    "Documentation:\n"
    "{reference_text}"
)


def build_system_prompt(reference_text: str) -> str:
    return GROUNDING_PROMPT.replace("{reference_text}", reference_text)


def speaker_label(role: Role) -> str:
    return "User" if role == Role.USER else "Assistant"


def format_transcript(context: Sequence[MessageRecord]) -> str:
    return "".join(f"{speaker_label(msg.role)}: {msg.content}\n" for msg in context)


def build_transcript_prompt(
    user_message: str, context: Sequence[MessageRecord], reference_text: str
) -> str:
    """Single-text prompt: grounding, prior turns, then the cue for the reply."""
    return (
        build_system_prompt(reference_text)
        + "\n\n"
        + format_transcript(context)
        + f"User: {user_message}\nAssistant:"
    )
