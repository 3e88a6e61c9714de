# corpus.py - sample text for the word count input table
#
# Public domain, from http://en.wikisource.org/wiki/If%E2%80%94
# Indexed by category_id; index 0 is never used.

TITLES = [
    "",
    "A",
    "B",
    "C",
    "D",
    "E",
]

BODIES = [
    "",
    "If you can keep your head when all about you",
    "Are losing theirs and blaming it on you",
    "If you can trust yourself when all men doubt you,",
    "But make allowance for their doubting too:",
    "If you can wait and not be tired by waiting,",
]
