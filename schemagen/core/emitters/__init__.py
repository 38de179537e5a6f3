"""Validator emitters and the library -> emitter lookup table.

Example usage:
    from schemagen.core.emitters import get_emitter

    result = get_emitter("valibot").emit(ir_result.schemas)
"""

from .arktype import ArktypeEmitter, arktype_emitter
from .base import Emitter, EmitterResult, ValidatorLibrary
from .effect import EffectEmitter, effect_emitter
from .valibot import ValibotEmitter, valibot_emitter
from .zod import ZodEmitter, zod_emitter

_EMITTERS: dict[ValidatorLibrary, Emitter] = {
    ValidatorLibrary.ZOD: zod_emitter,
    ValidatorLibrary.VALIBOT: valibot_emitter,
    ValidatorLibrary.ARKTYPE: arktype_emitter,
    ValidatorLibrary.EFFECT: effect_emitter,
}

SUPPORTED_VALIDATORS: tuple[str, ...] = tuple(library.value for library in ValidatorLibrary)


def is_validator_library(value: str) -> bool:
    """Check if a string names a supported validator library."""
    return value in SUPPORTED_VALIDATORS


def get_emitter(library: ValidatorLibrary | str) -> Emitter:
    """Get the emitter for a validator library.

    Raises:
        ValueError: If the library is not supported.
    """
    if not is_validator_library(library):
        raise ValueError(
            f'Unknown validator library "{library}". '
            f"Supported libraries: {', '.join(SUPPORTED_VALIDATORS)}"
        )
    return _EMITTERS[ValidatorLibrary(library)]


__all__ = [
    "ArktypeEmitter",
    "EffectEmitter",
    "Emitter",
    "EmitterResult",
    "SUPPORTED_VALIDATORS",
    "ValibotEmitter",
    "ValidatorLibrary",
    "ZodEmitter",
    "get_emitter",
    "is_validator_library",
]
