"""Pick a cover letter template and keep it under the site's length cap."""
from __future__ import annotations

import os
import random

from autoapply.log import get_logger
from autoapply.models import Posting

log = get_logger(__name__)

ELLIPSIS = "..."

TEMPLATES: tuple[str, ...] = (
    """Hi there,

I read your request "{title}" and I can help. I have shipped similar work before and can start right away. Happy to jump on a quick call to go over the details and agree on the next steps.

Best regards,
{name}""",
    """Hello,

Your request "{title}" is a good fit for my experience. I usually begin with a short session to understand the codebase and the goal, then work through the problem with you step by step so you understand the fix as well.

Looking forward to working with you,
{name}""",
    """Hi,

I'd be glad to help with "{title}". I've solved this kind of problem for other clients and can explain each change as we go. Let me know a time that works for you and we can get started.

Thanks,
{name}""",
)


def _candidate_name() -> str:
    return os.environ.get("CANDIDATE_NAME", "").strip() or "Candidate"


def truncate(text: str, max_length: int) -> str:
    """Cut ``text`` so the result, marker included, fits ``max_length``."""
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return ELLIPSIS[:max_length]
    return text[: max_length - len(ELLIPSIS)].rstrip() + ELLIPSIS


def generate_cover_letter(
    posting: Posting,
    max_length: int,
    *,
    rng: random.Random | None = None,
) -> str:
    template = (rng or random).choice(TEMPLATES)
    title = " ".join(posting.title.split()) or "your request"
    letter = template.format(title=title, name=_candidate_name())
    if len(letter) > max_length:
        log.debug("Cover letter for %s truncated to %d chars", posting.id, max_length)
    return truncate(letter, max_length)
