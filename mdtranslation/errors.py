"""
Error types for token-stream conversion.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""


class StructureError(Exception):
    """Raised when a token stream or a tree cannot be converted.

    Covers unbalanced or malformed token streams (builder, renderer,
    tokenizer adapter) and unsupported tags met during serialization.
    """
    pass
