"""Prompt sanitising for image, video and sound generation requests."""

from __future__ import annotations

import re
from collections.abc import Iterable

_BANNED_PHRASES = (
    "jailbait",
    "barely legal",
    "not legal",
    "child model",
    "teen model",
    "young model",
    "underage model",
    "juvenile model",
    "minor model",
    "age restricted",
    "age verification",
    "age check",
    "too young",
)

_EXCEPTIONS = (
    "power girl",
    "girl power",
    "boy band",
    "girlfriend",
    "boyfriend",
    "boyband",
    "girlband",
    "girls generation",
    "spice girls",
    "hells angels",
    "angel food",
    "angel hair",
    "angel numbers",
)

_AGE = r"(?:[1-9]|1\d|20)"
_UNIT = r"(?:yr|yrs|year|years)"

_REPLACEMENTS = [
    # Female youth terms
    (r"\b(girl|girls|grl|grll|grls|grlls)\b", "woman"),
    (r"\b(girly|girlish|maiden|maidens)\b", "woman"),
    (r"\b(little girl|young girl|small girl|tiny girl|young lady|little lady|small lady)\b", "woman"),
    (r"\b(schoolgirl|college girl|highschool girl|middle school girl|elementary girl)\b", "woman"),
    (r"\b(loli|lolli|lolita|gothic lolita|sweet lolita)\b", "woman"),
    (r"\b(brownie scout|girl scout|guides|junior guides)\b", "adult group"),
    # Male youth terms
    (r"\b(boy|boys|boi|boii|boyz)\b", "man"),
    (r"\b(boyish)\b", "mature"),
    (r"\b(little boy|young boy|small boy|tiny boy|young man|little man|small man)\b", "man"),
    (r"\b(schoolboy|college boy|highschool boy|middle school boy|elementary boy)\b", "man"),
    (r"\b(cubscout|cub scout|boy scout|eagle scout|webelos)\b", "adult group"),
    # Family terms with age context
    (r"\b(young|little|small|tiny)\s+(daughter|son|niece|nephew)\b", "adult relative"),
    (r"\b(granddaughter|grandson)\b", "relative"),
    # Generic youth terms
    (r"\b(child|children|kid|kids|kiddo|kiddies|kiddie|youngster|youngsters)\b", "adult"),
    (r"\b(teen|teens|teenager|teenagers|teenage|adolescent|adolescents)\b", "adult"),
    (r"\b(youth|youths|juvenile|juveniles|minor|minors|underage)\b", "adult"),
    (r"\b(baby|babies|infant|infants|toddler|toddlers|preschooler|preschoolers)\b", "adult"),
    (r"\b(tween|tweens|preteen|preteens|pre-teen|pre-teens)\b", "adult"),
    (r"\b(young adult|young person|young people|young ones|young individual)\b", "adult"),
    # School and education terms
    (r"\b(elementary school|grade school|primary school)\b", "workplace"),
    (r"\b(middle school|junior high|intermediate school)\b", "workplace"),
    (r"\b(high school|secondary school|prep school|preparatory school)\b", "workplace"),
    (r"\b(daycare|day care|nursery|preschool|kindergarten)\b", "workplace"),
    (r"\b(playground|playroom|play area|jungle gym|swing set)\b", "recreation area"),
    (r"\b(classroom|schoolroom|homeroom|study hall)\b", "meeting room"),
    # Physical description terms
    (r"\b(young body|young figure|youthful figure|youthful appearance)\b", "mature appearance"),
    (r"\b(underdeveloped|developing body|growing body|maturing)\b", "mature appearance"),
    (r"\b(innocent look|innocent appearance|pure|pure looking)\b", "mature appearance"),
    (r"\b(developing figure|budding|blossoming)\b", "mature appearance"),
    # Basic age patterns
    (rf"\b{_AGE}\s*(?:yr|yrs|year|years|y\.o\.|yo|yos|year-old|years-old)\b", "25 years"),
    (rf"\bage[d]?\s+{_AGE}\b", "age 25"),
    (rf"\b{_AGE}\s*years?\s*old\b", "25 years old"),
    # Variations with "aged"
    (rf"\baged?\s*{_AGE}\s*{_UNIT}?\b", "age 25"),
    (rf"\b{_AGE}\s*{_UNIT}-?aged\b", "25-year-aged"),
    # Age of / at age variations
    (rf"\b(?:age|aged)\s+of\s+{_AGE}\b", "age of 25"),
    (rf"\bat\s+(?:age|the\s+age\s+of)\s+{_AGE}\b", "at age 25"),
    (rf"\b{_AGE}\s*y(?:ea)?rs?\s+of\s+age\b", "25 years of age"),
    # Descriptive age patterns
    (rf"\bis\s+{_AGE}\s*{_UNIT}?\s*old\b", "is 25 years old"),
    (
        rf"\b(?:just|only|about|around|approximately|near(?:ly)?)\s+{_AGE}\s*(?:yr|yrs|years?)?\s*old?\b",
        "25 years old",
    ),
    (rf"\baround\s+{_AGE}\s*{_UNIT}?\s*old\b", "around 25 years old"),
    # "Under" age patterns
    (r"\b(?:under|below|beneath|less\s+than)\s*(?:[1-9]|1\d|20|twenty)\b", "over 25"),
    (
        r"\b(?:under|below|beneath|less\s+than)\s*the\s*age\s*of\s*(?:[1-9]|1\d|20|twenty)\b",
        "over age 25",
    ),
    # Specific age descriptors
    (rf"\b(?:turned|turning)\s+{_AGE}\b", "turned 25"),
    (rf"\b{_AGE}\s*{_UNIT}?\s*young\b", "25 years old"),
    (rf"\b(?:a|an)\s+{_AGE}\s*(?:yr|yrs|year|years?)?\s*old\b", "a 25 year old"),
    # Age with adjectives
    (rf"\b(?:young|mere(?:ly)?|bare(?:ly)?|only)\s+{_AGE}\b", "25"),
    (rf"\b(?:young|mere(?:ly)?|bare(?:ly)?|only)\s+{_AGE}\s*{_UNIT}?\s*old\b", "25 years old"),
    # Age ranges
    (rf"\b{_AGE}\s*(?:to|-)\s*{_AGE}\s*{_UNIT}?\s*old\b", "25 years old"),
    (rf"\bbetween\s+{_AGE}\s*(?:and|&|-)\s*{_AGE}\s*{_UNIT}?\b", "25 years"),
    # Specific contexts
    (rf"\b(?:appears|looks|seems)\s+{_AGE}\b", "appears 25"),
    (rf"\b{_AGE}\s*{_UNIT}?\s*of\s*age\b", "25 years of age"),
    (rf"\bage[d]?\s*(?:approximately|about|around|near(?:ly)?)\s*{_AGE}\b", "age 25"),
    # Written numbers
    (
        r"\b(?:one|two|three|four|five|six|seven|eight|nine|ten|eleven|twelve|thirteen|fourteen"
        r"|fifteen|sixteen|seventeen|eighteen|nineteen|twenty)\s*" + _UNIT + r"?\s*old\b",
        "25 years old",
    ),
    # Age with decimals
    (rf"\b(?:[1-9]|1\d)\.5\s*{_UNIT}?\s*old\b", "25 years old"),
    # Possessive forms
    (rf"\b(?:his|her|their)\s+{_AGE}\s*{_UNIT}\b", "their 25 years"),
    # Time-related contexts
    (rf"\b(?:after|before)\s+{_AGE}\s*{_UNIT}\b", "after 25 years"),
    (rf"\b(?:since|for)\s+{_AGE}\s*{_UNIT}\b", "for 25 years"),
    # Angel-related patterns
    (r"\b(young|little|small|tiny|pure|innocent)\s*(angel|angels)\b", "person"),
    (r"\b(angel|angels)\s*(model|models)\b", "person"),
    (
        r"\b(angelic)\s*(youth|child|children|girl|girls|boy|boys|teen|teens|teenager|teenagers)\b",
        "person",
    ),
    (r"\b(cherub|cherubs|cherubic)\b", "person"),
]

_COMPILED = [(re.compile(pattern, re.IGNORECASE | re.ASCII), repl) for pattern, repl in _REPLACEMENTS]


def clean_prompt(message: str) -> str:
    """Strip banned content and rewrite youth and age references in a prompt.

    Returns an empty string when the prompt contains a banned phrase, and the
    trimmed prompt unchanged when it contains a known harmless phrase.
    """
    message = message.strip()
    if not message:
        return ""

    lowered = message.lower()
    if any(phrase in lowered for phrase in _BANNED_PHRASES):
        return ""
    if any(phrase in lowered for phrase in _EXCEPTIONS):
        return message

    for pattern, replacement in _COMPILED:
        message = pattern.sub(replacement, message)

    return " ".join(message.split())


def bad_words_check(message: str, bad_words: Iterable[str]) -> bool:
    """Whether any of the bad words occurs in the message, ignoring case."""
    lowered = message.lower()
    return any(word.lower() in lowered for word in bad_words)