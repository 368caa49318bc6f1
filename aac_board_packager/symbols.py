"""Word to symbol resolution shared by the packagers.

Resolution runs in three steps:

1. *translate* a Hebrew word to its English equivalent (unknown words pass
   through unchanged),
2. *lookup* the English word in the core-vocabulary symbol table,
3. *fallback* to a Widgit rebus reference synthesised from the word itself.

The result is a :class:`SymbolRef`, an address-free identity of the symbol.
Each target format encodes that identity with its own
:class:`SymbolAddressing`, so a word is resolved once and re-encoded per
format instead of being looked up again.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

WIDGIT_REBUS = "widgit"
SYMBOLSTIX = "sstix#"

DEFAULT_WORD = "button"


@dataclass(frozen=True)
class SymbolRef:
    """Identity of a symbol inside a symbol library."""

    library: str
    name: str
    letter: str = ""


@dataclass(frozen=True)
class SymbolAddressing:
    """How a target format spells a :class:`SymbolRef`.

    ``template`` is used for Widgit rebus symbols, which are filed by first
    letter; ``stock_template`` for libraries addressed by a flat id.
    """

    template: str
    stock_template: str

    def encode(self, ref: SymbolRef) -> str:
        if ref.library == WIDGIT_REBUS:
            return self.template.format(letter=ref.letter, name=ref.name)
        return self.stock_template.format(library=ref.library, name=ref.name)


GRID3_ADDRESSING = SymbolAddressing(
    template="[widgit]widgit rebus\\{letter}\\{name}.emf",
    stock_template="[{library}]{name}.emf",
)


def _rebus(name: str) -> SymbolRef:
    return SymbolRef(WIDGIT_REBUS, name, name[:1])


TRANSLATIONS: Mapping[str, str] = MappingProxyType(
    {
        "רעב": "hungry",
        "צמא": "thirsty",
        "לאכול": "eat",
        "לשתות": "drink",
        "עוד": "more",
        "סיימתי": "finished",
        "גמר": "done",
        "נגמר": "done",
        "גמרתי": "done",
        "אין": "done",
        "all done": "done",
        "חם": "hot",
        "קר": "cold",
        "טוב": "good",
        "טוב לי": "good",
        "רע": "bad",
        "לא טוב": "bad",
        "כן": "yes",
        "לא": "no",
        "עזרה": "help",
        "שמח": "happy",
        "עצוב": "sad",
        "אהבה": "love",
        "רוצה": "want",
        "צריך": "need",
        "לשחק": "play",
        "טלוויזיה": "tv",
        "בחוץ": "outside",
        "לישון": "sleep",
        "עייף": "tired",
        "עייף/ה": "tired",
        "אמא": "mom",
        "אבא": "dad",
        "משפחה": "family",
        "בית": "home",
        "שירותים": "toilet",
        "בבקשה": "please",
        "תודה": "thank you",
        "שלום": "hello",
        "להתראות": "goodbye",
        "להתקלח": "wash",
        "ללכת": "go",
        "לחכות": "wait",
        "מפחד": "scared",
        "סוס": "horse",
        "עצור": "stop",
        "קדימה": "forward",
        "כועס": "angry",
        "מבולבל": "confused",
        "מופתע": "surprised",
        "נרגש": "excited",
        "רגוע": "calm",
    }
)

SYMBOLS: Mapping[str, SymbolRef] = MappingProxyType(
    {
        "hungry": SymbolRef(SYMBOLSTIX, "2724"),
        "eat": _rebus("eat"),
        "food": _rebus("food"),
        "drink": _rebus("drink"),
        "thirsty": _rebus("thirsty"),
        "water": _rebus("water"),
        "more": _rebus("more 1"),
        "finished": SymbolRef(WIDGIT_REBUS, "finish", "f"),
        "done": SymbolRef(WIDGIT_REBUS, "finish", "f"),
        "yes": _rebus("yes"),
        "no": _rebus("no"),
        "help": _rebus("help"),
        "happy": _rebus("happy"),
        "sad": _rebus("sad"),
        "love": _rebus("love"),
        "want": _rebus("want"),
        "need": _rebus("need"),
        "play": _rebus("play"),
        "tv": _rebus("tv"),
        "television": _rebus("tv"),
        "outside": _rebus("outside"),
        "sleep": _rebus("sleep"),
        "tired": _rebus("tired"),
        "mom": _rebus("mum"),
        "mum": _rebus("mum"),
        "mother": _rebus("mum"),
        "dad": _rebus("dad"),
        "father": _rebus("dad"),
        "family": _rebus("family"),
        "home": _rebus("home"),
        "house": _rebus("home"),
        "good": _rebus("good"),
        "bad": _rebus("bad"),
        "hot": _rebus("hot"),
        "cold": _rebus("shiver"),
        "toilet": _rebus("toilet"),
        "bathroom": _rebus("toilet"),
        "please": _rebus("please"),
        "thank you": _rebus("thank you"),
        "thanks": _rebus("thank you"),
        "hello": _rebus("hello"),
        "hi": _rebus("hello"),
        "goodbye": _rebus("goodbye"),
        "bye": _rebus("goodbye"),
        "wash": _rebus("wash"),
        "go": _rebus("go"),
        "wait": _rebus("wait"),
        "scared": _rebus("scared"),
        "horse": _rebus("horse"),
        "stop": _rebus("stop"),
        "forward": _rebus("forward"),
        "angry": _rebus("angry"),
        "confused": _rebus("confused"),
        "surprised": _rebus("surprised"),
        "excited": _rebus("excited"),
        "calm": _rebus("calm"),
        "video": _rebus("video"),
        "music": _rebus("music"),
    }
)

# FontAwesome classes the board editor uses, mapped to symbol words.
ICON_WORDS: Mapping[str, str] = MappingProxyType(
    {
        "fas fa-utensils": "eat",
        "fas fa-glass-water": "drink",
        "fas fa-restroom": "toilet",
        "fas fa-plus": "more",
        "fas fa-check": "finished",
        "fas fa-thumbs-up": "yes",
        "fas fa-thumbs-down": "no",
        "fas fa-question": "help",
        "fas fa-smile": "happy",
        "fas fa-frown": "sad",
        "fas fa-heart": "love",
        "fas fa-hand": "want",
        "fas fa-gamepad": "play",
        "fas fa-tv": "tv",
        "fas fa-tree": "outside",
        "fas fa-bed": "sleep",
        "fas fa-female": "mom",
        "fas fa-male": "dad",
        "fas fa-fire": "hot",
        "fas fa-snowflake": "cold",
    }
)


def translate(word: str) -> str:
    """Return the English equivalent of a Hebrew word, or *word* unchanged."""

    if word in TRANSLATIONS:
        return TRANSLATIONS[word]
    return TRANSLATIONS.get(word.strip().lower(), word)


def lookup(word: str) -> Optional[SymbolRef]:
    return SYMBOLS.get(word.strip().lower())


def fallback(word: str) -> SymbolRef:
    """Synthesise a rebus reference filed under the word's first letter."""

    name = word.strip().lower() or DEFAULT_WORD
    return SymbolRef(WIDGIT_REBUS, name, name[0])


def resolve(word: str) -> SymbolRef:
    english = translate(word)
    return lookup(english) or fallback(english)


def is_mapped(word: str) -> bool:
    return lookup(translate(word)) is not None


def icon_symbol(icon_ref: Optional[str]) -> Optional[str]:
    """Symbol word for a known icon class, if any."""

    if not icon_ref:
        return None
    return ICON_WORDS.get(icon_ref.strip())


def symbol_filename(symbol_path: str) -> str:
    """Last path component of a symbol path or URL."""

    return posixpath.basename(symbol_path.replace("\\", "/").rstrip("/"))


def symbol_stem(symbol_path: str) -> str:
    """Symbol file name without its ``.svg`` extension."""

    filename = symbol_filename(symbol_path)
    return filename[:-4] if filename.lower().endswith(".svg") else filename


def resolve_reference(word: str, addressing: SymbolAddressing = GRID3_ADDRESSING) -> str:
    """Resolve *word* and encode it with the given format addressing."""

    return addressing.encode(resolve(word))
