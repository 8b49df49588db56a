"""Code generation - ClosureSpec to Rust source text."""

from __future__ import annotations

import logging
from io import StringIO
from typing import TYPE_CHECKING

from clonesure.emitter import RustEmitter
from clonesure.options import ExpandOptions

if TYPE_CHECKING:
    from clonesure.types import ClosureSpec

logger = logging.getLogger(__name__)


def generate(spec: ClosureSpec, options: ExpandOptions | None = None) -> str:
    """Generate the expansion of a parsed closure.

    The result is a block that binds a clone of every captured variable and
    evaluates to the rewritten closure. Each clone shadows the outer name, so
    the body is emitted unchanged.

    Args:
        spec: Parsed closure.
        options: Output options; defaults to ExpandOptions().

    Returns:
        Rust source text of the block expression.
    """
    options = options or ExpandOptions()
    output = StringIO()
    emitter = RustEmitter(output, indent_width=options.indent, inline=options.inline)

    emitter.open_block()
    emit_bindings(spec, emitter, options)
    emit_rewritten_closure(spec, emitter)
    emitter.close_block()

    return output.getvalue().rstrip("\n")


def emit_bindings(
    spec: ClosureSpec, emitter: RustEmitter, options: ExpandOptions
) -> None:
    """Emit one clone binding per capture, in source order."""
    for capture in spec.captures:
        value = emitter.clone_expr(capture.name, qualified=options.qualified_clone)
        emitter.emit_let(capture.name, value, mutable=capture.mutable)


def emit_rewritten_closure(spec: ClosureSpec, emitter: RustEmitter) -> None:
    """Emit the closure with captures removed from its parameter list."""
    # Captured clones must be moved in, not borrowed from the block
    move = spec.explicit_move or bool(spec.captures)
    if move and not spec.explicit_move:
        logger.debug("Forcing `move` for captures %s", spec.capture_names)

    emitter.emit_closure(
        spec.param_texts,
        spec.body_text,
        move=move,
        return_type=spec.return_type_text,
    )
