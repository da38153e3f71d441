"""Compiled regular expressions and marker strings used by the normalizer.

Guideline numbers refer to the SPDX License List Matching Guidelines.
"""

import re

WILDCARD_CAP = 144
LONG_FORM_CAP = 1000

# Markers emitted into normalized template text
WILDCARD_MARKER = f"<<.{{1,{WILDCARD_CAP}}}>>"
OPTIONAL_WILDCARD_MARKER = f"<<.{{0,{WILDCARD_CAP}}}>>"
OMITABLE = "<<omitable>>"
OMITABLE_LINE = OMITABLE + "\n"
OMITABLE_END = "<</omitable>>"
MARKER_OPEN = "<<"
MARKER_CLOSE = ">>"

# Template markup
NOTE_TAG_RE = re.compile(r"<<note[:=].+?>>", re.IGNORECASE)
WILDCARD_RE = re.compile(r"<<match=\.\+>>", re.IGNORECASE)
OPTIONAL_WILDCARD_RE = re.compile(r"<<match=\.\*>>")
REPLACEABLE_TEXT_RE = re.compile(
    r"<<(?:var;(?:name=(.+?);)?(?:original=(.*?);)?)?match=(.+?)>>",
    re.IGNORECASE,
)
BEGIN_OPTIONAL_LINE_RE = re.compile(r"^<<beginOptional(?:;name=.*?)?>>", re.IGNORECASE | re.MULTILINE)
BEGIN_OPTIONAL_RE = re.compile(r"<<beginOptional(?:;name=.*?)?>>", re.IGNORECASE)
END_OPTIONAL_RE = re.compile(r"<<endOptional>>", re.IGNORECASE)

# Variable regex adjustments
LONG_FORM_SUFFIX = "{0,5000}?"
LONG_FORM_REPLACEMENT = f"{{0,{LONG_FORM_CAP}}}?"

# Input validation
CONTROL_CHARACTERS_RE = re.compile("[\u0000-\u0007\u000E-\u001B]")

# Stray control pictures and mojibake left by bad encodings
ODD_CHARACTERS_RE = re.compile(
    "^\\^l$|\u0080|\u0099|\u009C|\u009D|\u00AC|\u00E2|\u00A7|\u00C2|\u00A4|\u0153|\u20AC|\uFFFD",
    re.IGNORECASE | re.MULTILINE,
)

# Code comment indicators (guideline 6.1.1)
COMMENT_BLOCK_OUTSIDE_RE = re.compile(r"^\s*(?:/\*|-{2,3}\[=*\[)|(?:\*/|]=*])\s*$", re.MULTILINE)
COMMENT_BLOCK_INSIDE_RE = re.compile(r"^\s*[*#]|\*$", re.MULTILINE)
HTML_INLINE_COMMENT_RE = re.compile(r"<!--[^\n]*?-->")
HTML_STYLE_COMMENT_RE = re.compile(r"^\s*<!--|-->\s*$", re.MULTILINE)
COMMENT_LINE_RE = re.compile(r"^\s*(?://|>|--|;{1,4})", re.MULTILINE)

# Punctuation (guidelines 5.1.2 and 5.1.3)
DASH_LIKE_RE = re.compile("[\u002D\u2010\u2011\u2013\u2014\u2015\u2212\uFE58\uFE63\uFE0D]")
QUOTE_LIKE_RE = re.compile("[\u0022\u0027\u0060\u00B4\u2018\u2019\u201C\u201D]+")

# Hyperlink protocol (guideline 13.1.1)
HTTP_RE = re.compile(r"https?", re.IGNORECASE)

# Bullets and numbering (guideline 7.1.1); group 1 keeps the first word char
BULLETS_AND_NUMBERING_RE = re.compile(
    "^\\s*(?:[*+\u2022-]|\\(?(?:\\w|\\*|[\\divx#]+)[.)])\\s+(\\w?)",
    re.MULTILINE,
)

SPLIT_WORDS_RE = re.compile(r"\b-$\s+\b", re.MULTILINE)
HORIZONTAL_RULE_RE = re.compile(r"^\s*[*=-]{3,}", re.MULTILINE)

# Copyright symbol (guideline 9.1.1)
COPYRIGHT_RE = re.compile(r"\u00A9|\([cC]\)")

# Whitespace (guideline 3.1.1); U+00B7 is a middle dot
MIDDLE_WHITESPACE_RE = re.compile("(?:\\s|\u00B7)+")
LEADING_WHITESPACE_RE = re.compile(r"\A\s")
TRAILING_WHITESPACE_RE = re.compile(r"\s\Z")
