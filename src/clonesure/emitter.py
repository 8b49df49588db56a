"""Rust emitter for clonesure.

Provides the RustEmitter class that handles all output text generation.
The generator decides *what* to emit from a ClosureSpec; the emitter owns
*how* it is written: indentation, block layout and statement syntax.
"""

from __future__ import annotations

from typing import TextIO

QUALIFIED_CLONE = "::core::clone::Clone::clone"


class RustEmitter:
    """Generates Rust source text.

    Handles:
    - Line emission with automatic indentation, or single-line output
    - Block scopes
    - Binding statements and closure expressions
    """

    def __init__(
        self, stream: TextIO, indent_width: int = 2, inline: bool = False
    ) -> None:
        """Initialize the emitter.

        Args:
            stream: Output stream where code is written.
            indent_width: Spaces added per block level.
            inline: Join all emitted lines with single spaces.
        """
        self.stream = stream
        self.indent = 0
        self.indent_width = indent_width
        self.inline = inline
        self._started = False

    # =========================================================================
    # Core Emission
    # =========================================================================

    def line(self, code: str) -> None:
        """Emit a single line of code with proper indentation."""
        if self.inline:
            if self._started:
                self.stream.write(" ")
            self.stream.write(code)
        else:
            self.stream.write(" " * self.indent + code + "\n")
        self._started = True

    def indent_inc(self) -> None:
        """Increase indentation level."""
        self.indent += self.indent_width

    def indent_dec(self) -> None:
        """Decrease indentation level."""
        self.indent -= self.indent_width

    def open_block(self) -> None:
        self.line("{")
        self.indent_inc()

    def close_block(self) -> None:
        self.indent_dec()
        self.line("}")

    # =========================================================================
    # Statements and Expressions
    # =========================================================================

    def clone_expr(self, name: str, qualified: bool = False) -> str:
        """Expression cloning the variable `name`."""
        if qualified:
            return f"{QUALIFIED_CLONE}(&{name})"
        return f"{name}.clone()"

    def emit_let(self, name: str, value: str, mutable: bool = False) -> None:
        """Emit a `let` binding statement."""
        mut = "mut " if mutable else ""
        self.line(f"let {mut}{name} = {value};")

    def emit_closure(
        self,
        params: list[str],
        body: str,
        move: bool = False,
        return_type: str | None = None,
    ) -> None:
        """Emit a closure expression.

        The body is written verbatim; continuation lines keep whatever
        indentation they had in the source.
        """
        head = "move " if move else ""
        head += "|" + ", ".join(params) + "|"
        if return_type is not None:
            head += f" -> {return_type}"
        self.line(f"{head} {body}")
