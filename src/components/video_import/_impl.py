"""
Turning a channel upload into article fields.

Key behaviors:
- promotional footers (donation, contact, follow, copyright lines) are cut
  from the end of the description before anything else
- hashtags anywhere and a comma-separated tag block near the end become tags
  and are removed from the description
- the uploader's own video tags win over tags found in the description
"""

from __future__ import annotations

import html
import re

from .models import ImportConfig, PreparedPost, VideoPayload

# --- Configuration ---

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
EMBED_URL = "https://www.youtube.com/embed/{video_id}"

THUMBNAIL_PREFERENCE: tuple[str, ...] = ("maxres", "high", "default")

BOILERPLATE_MARKERS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # Confessional slogans used as a footer
        r"^jesus is lord$",
        r"^jesus christ is lord$",
        # Contact details
        r"contact.*?:",
        r"email.*?:",
        r"skype.*?:",
        r"reach.*?us",
        # Donations
        r"donate",
        r"paypal",
        r"cashapp",
        r"cash app",
        r"support.*?ministry",
        # Social follow links
        r"follow.*?us",
        r"follow.*?on",
        r"twitter.*?:",
        r"rumble.*?:",
        r"website.*?:",
        r"visit.*?website",
        # Speaking invitations
        r"speaking.*?invitation",
        r"invite.*?speak",
        r"book.*?speaker",
        # Copyright and disclaimers
        r"copyright",
        r"fair use",
        r"disclaimer",
        r"all rights reserved",
        # Comment moderation
        r"no.*?weblinks",
        r"comment.*?policy",
        r"moderation",
        # Scripture footer
        r"^john\s+20:\s*31",
    )
)

# Only the tail of a description is searched for footers and tag blocks
BOILERPLATE_WINDOW = 10
BOILERPLATE_LOOKBACK = 5
TAG_BLOCK_WINDOW = 5

TAG_BLOCK_MIN_TOKENS = 10
TAG_BLOCK_LINE_TOKENS = 5
MAX_TAG_LENGTH = 50

_HASHTAG = re.compile(r"#(\w+)", re.ASCII)
_TAG_TOKEN = re.compile(r"^[a-zA-Z0-9\s\-']+$")
_SENTENCE_BREAKS = (". ", "! ", "? ")
_BLANK_RUNS = re.compile(r"\n{3,}")
_HTML_TAGS = re.compile(r"<[^>]*>")
_MARKER_LEAD = re.compile(r"[:\-]")


def _tidy(text: str) -> str:
    text = _BLANK_RUNS.sub("\n\n", text)
    return "\n".join(line.rstrip() for line in text.split("\n")).strip()


# --- Boilerplate ---


def is_boilerplate(line: str) -> bool:
    lead = _MARKER_LEAD.split(line, maxsplit=1)[0].strip()
    return any(marker.search(line) or marker.search(lead) for marker in BOILERPLATE_MARKERS)


def strip_boilerplate(description: str) -> str:
    """Remove a promotional footer block (and everything after it) from a description."""
    if not description or not description.strip():
        return ""

    lines = description.split("\n")
    window_start = max(0, len(lines) - BOILERPLATE_WINDOW)
    footer_start: int | None = None

    for i in range(len(lines) - 1, window_start - 1, -1):
        line = lines[i].strip()
        if not line or not is_boilerplate(line):
            continue

        footer_start = i
        # Walk back over adjacent footer lines; a blank line is crossed only
        # when the next non-blank line above it is also footer
        floor = max(0, window_start - BOILERPLATE_LOOKBACK)
        j = i - 1
        while j >= floor:
            previous = lines[j].strip()
            if not previous:
                k = j - 1
                while k >= 0 and not lines[k].strip():
                    k -= 1
                if k >= 0 and is_boilerplate(lines[k].strip()):
                    footer_start = k
                    j = k - 1
                    continue
                break
            if not is_boilerplate(previous):
                break
            footer_start = j
            j -= 1
        break

    if footer_start is not None:
        del lines[footer_start:]
    return _tidy("\n".join(lines))


# --- Tags ---


def _tokens(line: str) -> list[str]:
    return [t.strip() for t in line.split(",") if t.strip()]


def _is_tag_token(token: str) -> bool:
    if len(token) > MAX_TAG_LENGTH:
        return False
    if any(brk in token for brk in _SENTENCE_BREAKS):
        return False
    return bool(_TAG_TOKEN.match(token))


def _tag_block_bounds(lines: list[str]) -> tuple[int, int] | None:
    window_start = max(0, len(lines) - TAG_BLOCK_WINDOW)
    for i in range(len(lines) - 1, window_start - 1, -1):
        line = lines[i].strip()
        if not line:
            continue

        count = len(_tokens(line))
        continued = (
            count >= TAG_BLOCK_LINE_TOKENS
            and i < len(lines) - 1
            and len(_tokens(lines[i + 1])) >= TAG_BLOCK_LINE_TOKENS
        )
        if count < TAG_BLOCK_MIN_TOKENS and not continued:
            continue

        start = i
        j = i - 1
        while j >= window_start and lines[j].strip() and len(_tokens(lines[j])) >= TAG_BLOCK_LINE_TOKENS:
            start = j
            j -= 1
        return start, i + 1
    return None


def extract_tags(description: str, max_tags: int = 50) -> tuple[str, list[str]]:
    """
    Pull hashtags and a trailing comma-separated tag block out of a description.

    Returns the description without them and the tags found (lowercased,
    de-duplicated, in order of appearance).
    """
    if not description or not description.strip():
        return "", []

    found: dict[str, None] = {}
    for match in _HASHTAG.finditer(description):
        found.setdefault(match.group(1).lower(), None)
    cleaned = _HASHTAG.sub("", description)

    lines = cleaned.split("\n")
    bounds = _tag_block_bounds(lines)
    if bounds is not None:
        start, end = bounds
        for token in _tokens(", ".join(lines[start:end])):
            if _is_tag_token(token):
                found.setdefault(token.lower(), None)
        del lines[start:end]
        cleaned = "\n".join(lines).strip()

    return _tidy(cleaned), list(found)[:max_tags]


def choose_tags(video_tags: tuple[str, ...] | list[str], extracted: list[str], max_tags: int = 50) -> list[str]:
    """The uploader's tags when there are any, else the tags found in the description."""
    source = video_tags if video_tags else extracted
    chosen: dict[str, None] = {}
    for tag in source:
        normalized = tag.strip().lower().lstrip("#")
        if normalized:
            chosen.setdefault(normalized, None)
    return list(chosen)[:max_tags]


# --- Display Fields ---


def pick_thumbnail(thumbnails: dict[str, str]) -> str | None:
    for size in THUMBNAIL_PREFERENCE:
        if thumbnails.get(size):
            return thumbnails[size]
    return None


def build_excerpt(description: str, length: int = 160) -> str:
    text = _HTML_TAGS.sub("", description.replace("\n", " ")).strip()
    return text[:length]


def build_body(description: str, video_id: str, width: int = 560, height: int = 315) -> str:
    """Escaped description paragraph followed by the player embed."""
    paragraph = html.escape(description, quote=False).replace("\n", "<br>")
    embed = (
        f'<iframe width="{width}" height="{height}" src="{EMBED_URL.format(video_id=video_id)}" '
        'frameborder="0" allow="accelerometer; autoplay; clipboard-write; encrypted-media; '
        'gyroscope; picture-in-picture" allowfullscreen></iframe>'
    )
    return f"<p>{paragraph}</p>\n\n{embed}"


def watch_url(video_id: str) -> str:
    return WATCH_URL.format(video_id=video_id)


def prepare_post(video: VideoPayload, config: ImportConfig) -> PreparedPost:
    without_footer = strip_boilerplate(video.description)
    description, extracted = extract_tags(without_footer, config.max_tags)
    return PreparedPost(
        title=video.title.strip(),
        excerpt=build_excerpt(description, config.excerpt_length),
        content=build_body(description, video.video_id, config.embed_width, config.embed_height),
        tags=choose_tags(video.tags, extracted, config.max_tags),
        thumbnail_url=pick_thumbnail(video.thumbnails),
        description_clean=description,
    )
