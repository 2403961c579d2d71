"""Lexical similarity between suggestion texts.

Similarity is the Jaccard index of the sets of lower-cased,
whitespace-delimited words in each text. It is a cheap overlap heuristic,
not a semantic measure.
"""


def tokenize(text: str) -> frozenset[str]:
    """Split text into its set of unique lower-cased words."""
    return frozenset(text.lower().split())


def similarity(text_a: str, text_b: str) -> float:
    """Compute the Jaccard similarity of two texts.

    Args:
        text_a: First text.
        text_b: Second text.

    Returns:
        Score between 0.0 and 1.0. Two texts with no words score 0.0.
    """
    words_a = tokenize(text_a)
    words_b = tokenize(text_b)

    union = words_a | words_b
    if not union:
        return 0.0

    return len(words_a & words_b) / len(union)
