"""Language-aware text analysis and FTS5 MATCH expressions.

Indexed text and query text go through the same analyzer: lowercase, drop
stopwords, reduce each word to its Snowball stem. The FTS5 tables only ever
see stems, so ``sites`` finds ``site`` and ``testing the site`` finds a row
about testing sites.

Supported query syntax, the same as most search boxes:

- ``testing site``: every word must match
- ``"clean javascript"``: the words must appear as a phrase
- ``javascript or python``: either side may match
- ``-python``: rows containing the word are excluded

Only stems reach FTS5, so punctuation in user input can never produce an
FTS5 syntax error.
"""

import re
import threading
from dataclasses import dataclass, field

import snowballstemmer

from .models import Language

FTS_TABLES = {
    Language.ENGLISH: "links_fts_en",
    Language.FRENCH: "links_fts_fr",
}

# Snowball stemmer algorithm names
_ALGORITHMS = {
    Language.ENGLISH: "english",
    Language.FRENCH: "french",
}

# Snowball project stopword lists
STOPWORDS = {
    Language.ENGLISH: frozenset(
        """
        i me my myself we our ours ourselves you your yours yourself yourselves
        he him his himself she her hers herself it its itself they them their
        theirs themselves what which who whom this that these those am is are
        was were be been being have has had having do does did doing would
        should could ought a an the and but if or because as until while of at
        by for with about against between into through during before after
        above below to from up down in out on off over under again further then
        once here there when where why how all any both each few more most
        other some such no nor not only own same so than too very s t can will
        just don now
        """.split()
    ),
    Language.FRENCH: frozenset(
        """
        au aux avec ce ces dans de des du elle en et eux il je la le leur lui
        ma mais me même mes moi mon ne nos notre nous on ou par pas pour qu que
        qui sa se ses son sur ta te tes toi ton tu un une vos votre vous c d j
        l à m n s t y été étée étées étés étant suis es est sommes êtes sont
        serai seras sera serons serez seront serais serait serions seriez
        seraient étais était étions étiez étaient fus fut fûmes fûtes furent
        sois soit soyons soyez soient fusse fusses fût fussions fussiez
        fussent ayant eu eue eues eus ai as avons avez ont aurai auras aura
        aurons aurez auront aurais aurait aurions auriez auraient avais avait
        avions aviez avaient eut eûmes eûtes eurent aie aies ait ayons ayez
        aient eusse eusses eût eussions eussiez eussent ceci cela celà cet
        cette ici ils les leurs quel quels quelle quelles sans soi
        """.split()
    ),
}

_TOKEN_RE = re.compile(r'-?"[^"]*"?|\S+')
_WORD_RE = re.compile(r"\w+")

# Snowball stemmer objects keep per-call state, so each thread gets its own.
_local = threading.local()


def _stemmer(language: Language):
    stemmers = getattr(_local, "stemmers", None)
    if stemmers is None:
        stemmers = _local.stemmers = {}
    if language not in stemmers:
        stemmers[language] = snowballstemmer.stemmer(_ALGORITHMS[language])
    return stemmers[language]


def analyze(text: str, language: Language) -> list[str]:
    """Split ``text`` into stemmed words, dropping stopwords."""
    words = [w for w in _WORD_RE.findall(text.lower()) if w not in STOPWORDS[language]]
    return _stemmer(language).stemWords(words)


def stem_text(language: str | None, text: str | None) -> str | None:
    """SQL function used by the FTS triggers to index a column."""
    if text is None or not Language.is_supported(language):
        return None
    return " ".join(analyze(text, Language(language)))


@dataclass
class _Group:
    include: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)

    def render(self) -> str | None:
        if not self.include:
            return None
        expr = " AND ".join(self.include)
        if len(self.include) > 1 and self.exclude:
            expr = f"({expr})"
        for term in self.exclude:
            expr = f"{expr} NOT {term}"
        return f"({expr})"


def _quote(words: list[str]) -> str:
    return '"' + " ".join(words) + '"'


def build_match_expression(text: str, language: Language) -> str | None:
    """Return an FTS5 expression for ``text``, or None if it has no terms."""
    groups = [_Group()]

    for token in _TOKEN_RE.findall(text):
        negate = token.startswith("-") and len(token) > 1
        body = token[1:] if negate else token

        if body.lower() == "or" and not negate:
            if groups[-1].include or groups[-1].exclude:
                groups.append(_Group())
            continue

        stems = analyze(body, language)
        if not stems:
            continue

        term = _quote(stems)
        if negate:
            groups[-1].exclude.append(term)
        else:
            groups[-1].include.append(term)

    rendered = [expr for expr in (g.render() for g in groups) if expr]
    if not rendered:
        return None
    if len(rendered) == 1:
        return rendered[0]
    return " OR ".join(rendered)
