import sys

from fairdice.config import EXAMPLE_DICE


class DiceGameError(Exception):
    """Base class for every error raised by the game."""


class ConfigurationError(DiceGameError):
    """
    Malformed dice configuration or settings.
    Provides a formatted message including an example of correct usage.
    """
    _invocation_command = "python"

    @staticmethod
    def set_invocation_command(command: str):
        """Sets the command used to run the script (e.g., 'python' or 'py')."""
        ConfigurationError._invocation_command = command

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        script_name = sys.argv[0] if sys.argv and sys.argv[0] else 'game.py'
        example = f"{ConfigurationError._invocation_command} {script_name} {' '.join(EXAMPLE_DICE)}"
        return f"\nArgument Error: {self.message}\n\nExample usage:\n{example}\n"

    @classmethod
    def not_enough_dice(cls, count: int, minimum: int) -> "ConfigurationError":
        return cls(f"Please specify at least {minimum} dice (got {count}).")

    @classmethod
    def non_integer_value(cls, entry: str) -> "ConfigurationError":
        return cls(f"Invalid dice configuration: \"{entry}\". All dice faces must be integer values.")

    @classmethod
    def empty_die(cls, entry: str) -> "ConfigurationError":
        return cls(f"Invalid dice configuration: \"{entry}\". A die must have at least one face.")


class InvalidRange(DiceGameError, ValueError):
    """Raised when a fair random draw is requested over an empty or malformed range."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Range must be an integer >= 1, got {value!r}.")


class IndexOutOfRange(DiceGameError, IndexError):
    def __init__(self, index, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Face index {index!r} is outside 0..{size - 1}.")


class InvalidSelection(DiceGameError):
    """User input that is not one of the offered menu options."""

    def __init__(self, choice: str):
        self.choice = choice
        super().__init__(f"Invalid choice: {choice!r}")


class GameCancelled(DiceGameError):
    """The player left the game, or the input stream ended."""


class RetriesExhausted(GameCancelled):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Too many invalid answers ({attempts}).")


class GameStateError(DiceGameError, RuntimeError):
    """Illegal phase transition or broken dice ownership. Always a bug."""


class CommitmentMismatch(DiceGameError):
    """A revealed key and value do not reproduce the published HMAC."""
