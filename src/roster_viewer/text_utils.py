"""Text helpers for reading hand-typed schedule cells."""

_FULLWIDTH_DIGIT_ZERO = ord("０")
_FULLWIDTH_UPPER_A = ord("Ａ")
_FULLWIDTH_LOWER_A = ord("ａ")

_HALFWIDTH_TABLE = {
    **{_FULLWIDTH_DIGIT_ZERO + i: ord("0") + i for i in range(10)},
    **{_FULLWIDTH_UPPER_A + i: ord("A") + i for i in range(26)},
    **{_FULLWIDTH_LOWER_A + i: ord("a") + i for i in range(26)},
    ord("　"): ord(" "),
}


def to_halfwidth(text: str) -> str:
    """
    Convert fullwidth digits, Latin letters and the ideographic space to ASCII.

    Every other character (kana, kanji, punctuation) is returned unchanged,
    so the result always has the same length as the input.
    """
    return text.translate(_HALFWIDTH_TABLE)
