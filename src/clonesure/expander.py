"""Expansion entry point - closure literal text in, Rust block text out."""

from __future__ import annotations

import logging

from clonesure.generator import generate
from clonesure.lexer import tokenize
from clonesure.options import ExpandOptions
from clonesure.parser import parse

logger = logging.getLogger(__name__)


def expand(source: str, options: ExpandOptions | None = None) -> str:
    """Expand an annotated closure literal.

    Args:
        source: Closure literal, e.g. ``|@mut s1, @s2, s3| { s1 + &s2 + s3 }``.
        options: Output options.

    Returns:
        Rust source of a block binding the clones and evaluating to the
        rewritten closure.

    Raises:
        ClosureSyntaxError: If the literal is malformed. Nothing is emitted
            in that case.
    """
    tokens = tokenize(source)
    spec = parse(tokens, source)
    result = generate(spec, options)
    logger.debug("Expanded %d captures, %d params", len(spec.captures), len(spec.params))
    return result
