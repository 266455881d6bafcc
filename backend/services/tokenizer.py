"""
Reading-view tokenizer.

Splits a Polish text into whitespace, word and pass-through segments so that
every word can be rendered as its own clickable unit while the punctuation
around it stays untouched.
"""

from dataclasses import dataclass
import re

from markupsafe import Markup, escape

WORD_ALPHABET = "A-Za-ząćęłńóśźżĄĆĘŁŃÓŚŹŻ"

_CHUNK_RE = re.compile(r"\s+|\S+")
_WORD_RE = re.compile(f"[{WORD_ALPHABET}]+")

WHITESPACE = "whitespace"
WORD = "word"
TEXT = "text"


@dataclass(frozen=True)
class Segment:
    """One piece of the tokenized text.

    ``word`` segments carry the punctuation immediately around the word in
    ``leading``/``trailing``; the other kinds only use ``text``.
    """

    kind: str
    text: str
    leading: str = ""
    word: str = ""
    trailing: str = ""

    @property
    def is_word(self) -> bool:
        return self.kind == WORD

    def to_dict(self) -> dict:
        if self.is_word:
            return {
                "type": self.kind,
                "text": self.text,
                "leading": self.leading,
                "word": self.word,
                "trailing": self.trailing,
            }
        return {"type": self.kind, "text": self.text}


def _split_chunk(chunk: str) -> list[Segment]:
    matches = list(_WORD_RE.finditer(chunk))
    if not matches:
        return [Segment(TEXT, chunk)]

    segments = []
    for i, match in enumerate(matches):
        # The first word owns whatever precedes it; later words start right
        # where the previous word's trailing punctuation ended.
        start = 0 if i == 0 else match.start()
        end = matches[i + 1].start() if i + 1 < len(matches) else len(chunk)
        segments.append(
            Segment(
                WORD,
                chunk[start:end],
                leading=chunk[start : match.start()],
                word=match.group(),
                trailing=chunk[match.end() : end],
            )
        )
    return segments


def tokenize(text: str) -> list[Segment]:
    """
    Split text into ordered segments.

    Concatenating ``segment.text`` over the result reproduces the input
    exactly. Words with internal punctuation ("biało-czerwony") come out as
    several word segments.
    """
    segments = []
    for chunk in _CHUNK_RE.findall(text or ""):
        if chunk.isspace():
            segments.append(Segment(WHITESPACE, chunk))
        else:
            segments.extend(_split_chunk(chunk))
    return segments


def words(segments: list[Segment]) -> list[str]:
    return [segment.word for segment in segments if segment.is_word]


def render_html(segments: list[Segment]) -> Markup:
    """Render segments as HTML with each word wrapped in a clickable span."""
    parts = []
    for segment in segments:
        if segment.is_word:
            parts.append(
                Markup('{}<span class="word" data-word="{}">{}</span>{}').format(
                    segment.leading, segment.word, segment.word, segment.trailing
                )
            )
        else:
            parts.append(escape(segment.text))
    return Markup("").join(parts)
