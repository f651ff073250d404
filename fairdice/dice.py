import logging
import re

from fairdice.config import MIN_DICE
from fairdice.errors import ConfigurationError, IndexOutOfRange

logger = logging.getLogger(__name__)

_FACE_PATTERN = re.compile(r"-?[0-9]+")


class Die:
    """An immutable, ordered list of integer faces. Duplicates are allowed."""

    __slots__ = ("_faces",)

    def __init__(self, faces):
        faces = tuple(faces)
        if not faces:
            raise ValueError("A die must have at least one face.")
        if any(isinstance(f, bool) or not isinstance(f, int) for f in faces):
            raise TypeError(f"Die faces must be integers, got {faces!r}.")
        object.__setattr__(self, "_faces", faces)

    def __setattr__(self, name, value):
        raise AttributeError("Die is immutable")

    @property
    def faces(self) -> tuple[int, ...]:
        return self._faces

    def value_at(self, index: int) -> int:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._faces):
            raise IndexOutOfRange(index, len(self._faces))
        return self._faces[index]

    def __len__(self) -> int:
        return len(self._faces)

    def __str__(self) -> str:
        return ",".join(map(str, self._faces))

    def __repr__(self) -> str:
        return f"Die([{self}])"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Die):
            return NotImplemented
        return self._faces == other._faces

    def __hash__(self) -> int:
        return hash(self._faces)


class DiceParser:
    @staticmethod
    def parse_die(entry: str) -> Die:
        tokens = [token.strip() for token in entry.split(',')]
        if tokens == [""]:
            raise ConfigurationError.empty_die(entry)
        if not all(_FACE_PATTERN.fullmatch(token) for token in tokens):
            raise ConfigurationError.non_integer_value(entry)
        return Die(int(token) for token in tokens)

    @staticmethod
    def parse(args: list[str]) -> list[Die]:
        if len(args) < MIN_DICE:
            raise ConfigurationError.not_enough_dice(len(args), MIN_DICE)
        dice_list = [DiceParser.parse_die(arg) for arg in args]
        logger.debug("Loaded %d dice: %s", len(dice_list), " | ".join(map(str, dice_list)))
        return dice_list
