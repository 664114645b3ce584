import re
from typing import Iterable, Mapping

# USPS Publication 28 street suffixes, directionals and unit designators, plus
# the local landmark names the Fulton County search form stores abbreviated.
ABBREVIATIONS = {
    # landmarks
    "MARTIN LUTHER KING JUNIOR": "M L KING JR",
    "MARTIN LUTHER KING JR": "M L KING JR",
    "MARTIN LUTHER KING": "M L KING",
    "MLK JR": "M L KING JR",
    "MLK": "M L KING",
    # directionals
    "NORTHEAST": "NE",
    "NORTHWEST": "NW",
    "SOUTHEAST": "SE",
    "SOUTHWEST": "SW",
    "NORTH": "N",
    "SOUTH": "S",
    "EAST": "E",
    "WEST": "W",
    # street suffixes
    "ALLEY": "ALY",
    "AVENUE": "AVE",
    "BOULEVARD": "BLVD",
    "CIRCLE": "CIR",
    "COURT": "CT",
    "COVE": "CV",
    "CREEK": "CRK",
    "CRESCENT": "CRES",
    "CROSSING": "XING",
    "DRIVE": "DR",
    "EXPRESSWAY": "EXPY",
    "FREEWAY": "FWY",
    "HIGHWAY": "HWY",
    "HILL": "HL",
    "HILLS": "HLS",
    "LANDING": "LNDG",
    "LANE": "LN",
    "MOUNTAIN": "MTN",
    "PARKWAY": "PKWY",
    "PLACE": "PL",
    "PLAZA": "PLZ",
    "POINT": "PT",
    "RIDGE": "RDG",
    "ROAD": "RD",
    "SPRING": "SPG",
    "SPRINGS": "SPGS",
    "SQUARE": "SQ",
    "STREET": "ST",
    "TERRACE": "TER",
    "TRACE": "TRCE",
    "TRAIL": "TRL",
    "TURNPIKE": "TPKE",
    "VIEW": "VW",
    # units
    "APARTMENT": "APT",
    "BUILDING": "BLDG",
    "FLOOR": "FL",
    "ROOM": "RM",
    "SUITE": "STE",
}

# Municipalities in Fulton County plus Atlanta-area mailing cities.
CITY_TOKENS = frozenset({
    "GA",
    "GEORGIA",
    "ALPHARETTA",
    "ATLANTA",
    "CHATTAHOOCHEE HILLS",
    "COLLEGE PARK",
    "DECATUR",
    "EAST POINT",
    "FAIRBURN",
    "HAPEVILLE",
    "JOHNS CREEK",
    "MILTON",
    "MOUNTAIN PARK",
    "PALMETTO",
    "ROSWELL",
    "SANDY SPRINGS",
    "SOUTH FULTON",
    "UNION CITY",
})

_DIRECTIONALS = frozenset({"N", "S", "E", "W", "NE", "NW", "SE", "SW"})

# Abbreviated suffixes that end the street name.
STREET_SUFFIXES = frozenset({
    "ALY", "AVE", "BLVD", "CIR", "CT", "CV", "CRK", "CRES", "XING", "DR", "EXPY",
    "FWY", "HWY", "HL", "HLS", "LNDG", "LN", "LOOP", "MTN", "PATH", "PIKE", "PKWY",
    "PL", "PLZ", "PT", "RDG", "RD", "ROW", "RUN", "SPG", "SPGS", "SQ", "ST", "TER",
    "TRCE", "TRL", "TPKE", "VW", "WALK", "WAY",
})

_PUNCTUATION = re.compile(r"[.,#]")
_ZIP = re.compile(r"^\d{5}(?:-\d{4})?$")


def _key_pattern(key: str) -> str:
    words = key.split()
    return r"(?<![^\W_])" + r"\s+".join(re.escape(w) for w in words) + r"(?![^\W_])"


def _overlaps(key_words: list[str], replacement_words: list[str]) -> bool:
    """True if the replacement, placed anywhere against the key, agrees with it on every shared word."""
    for offset in range(1 - len(replacement_words), len(key_words)):
        shared = [
            (key_words[offset + j], word)
            for j, word in enumerate(replacement_words)
            if 0 <= offset + j < len(key_words)
        ]
        if all(k == r for k, r in shared):
            return True
    return False


class AbbreviationTable:
    """Whole-word abbreviation rules applied longest key first.

    Rules live in ``self.rules`` as an ordered tuple of ``(pattern, replacement)``
    pairs sorted by descending key length. They are compiled into one
    alternation and applied in a single pass, so a replacement is never
    rescanned by a later rule.
    """

    def __init__(self, entries: Mapping[str, str]):
        table = {}
        for key, replacement in entries.items():
            key = " ".join(key.upper().split())
            if not key:
                raise ValueError("abbreviation keys must not be empty")
            table[key] = " ".join(replacement.upper().split())

        self.keys = tuple(sorted(table, key=lambda k: (-len(k), k)))
        self.rules = tuple((_key_pattern(k), table[k]) for k in self.keys)
        self._lookup = table
        self._regex = re.compile("|".join(p for p, _ in self.rules)) if self.rules else None

        multi_word = [k.split() for k in table if " " in k]
        for key, replacement in table.items():
            if self._regex is not None and self._regex.search(replacement):
                raise ValueError(
                    f"replacement {replacement!r} for {key!r} matches another key; "
                    "normalizing twice would change the result"
                )
            # "SAINT" -> "ST" next to "JOHN" would form the key "ST JOHN" on a second pass.
            for other in multi_word:
                if replacement and _overlaps(other, replacement.split()):
                    raise ValueError(
                        f"replacement {replacement!r} for {key!r} can combine with neighbouring "
                        f"words into the key {' '.join(other)!r}; normalizing twice would change the result"
                    )

    def __len__(self) -> int:
        return len(self.rules)

    def apply(self, text: str) -> str:
        if self._regex is None:
            return text
        return self._regex.sub(lambda m: self._lookup[" ".join(m.group(0).split())], text)


class AddressNormalizer:
    def __init__(
        self,
        abbreviations: Mapping[str, str] | None = None,
        city_tokens: Iterable[str] | None = None,
        street_suffixes: Iterable[str] | None = None,
    ):
        self.street_suffixes = frozenset(
            s.upper() for s in (STREET_SUFFIXES if street_suffixes is None else street_suffixes)
        )
        self.abbreviations = AbbreviationTable(
            ABBREVIATIONS if abbreviations is None else abbreviations
        )
        cities = CITY_TOKENS if city_tokens is None else city_tokens
        # Truncation runs after abbreviation, so city names are stored abbreviated
        # ("EAST POINT" is matched as "E PT").
        phrases = set()
        for city in cities:
            words = tuple(self.abbreviations.apply(city.upper()).split())
            if words:
                phrases.add(words)
        self.city_phrases = frozenset(phrases)
        self._max_phrase = max((len(p) for p in self.city_phrases), default=0)

    def _is_suffix_start(self, tokens: list[str], i: int) -> bool:
        if _ZIP.match(tokens[i]):
            return True
        for size in range(1, self._max_phrase + 1):
            if tuple(tokens[i:i + size]) in self.city_phrases:
                return True
        return False

    def _in_city_phrase(self, tokens: list[str], i: int) -> bool:
        for start in range(max(0, i - self._max_phrase + 1), i + 1):
            for size in range(i - start + 1, self._max_phrase + 1):
                if tuple(tokens[start:start + size]) in self.city_phrases:
                    return True
        return False

    def _first_scan_index(self, tokens: list[str]) -> int:
        # House number, directional prefix and the street name up to its suffix
        # are never a locality suffix ("123 ROSWELL RD", "100 OLD MILTON PKWY",
        # "10250 MAIN ST"). Without a suffix only the first street word is kept.
        if not tokens or not tokens[0][0].isdigit():
            return 0
        i = 1
        while i < len(tokens) and tokens[i] in _DIRECTIONALS:
            i += 1
        for j in range(i, len(tokens)):
            if _ZIP.match(tokens[j]):
                break
            if tokens[j] in self.street_suffixes and not self._in_city_phrase(tokens, j):
                return j + 1
        return i + 1

    def strip_locality(self, text: str) -> str:
        tokens = text.split()
        for i in range(self._first_scan_index(tokens), len(tokens)):
            if self._is_suffix_start(tokens, i):
                return " ".join(tokens[:i])
        return " ".join(tokens)

    def normalize(self, raw: str | None) -> str:
        if not raw:
            return ""
        result = raw.upper()
        result = _PUNCTUATION.sub(" ", result)
        result = self.abbreviations.apply(result)
        result = self.strip_locality(result)
        result = re.sub(r"\s+", " ", result).strip()
        return result


DEFAULT_NORMALIZER = AddressNormalizer()


def normalize(raw: str | None) -> str:
    """Turn a free-form address into the street-level string the county search expects."""
    return DEFAULT_NORMALIZER.normalize(raw)
