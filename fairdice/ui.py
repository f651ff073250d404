import logging
import sys
from typing import Callable, Optional

from fairdice.config import DEFAULT_MAX_RETRIES
from fairdice.errors import GameCancelled, InvalidSelection, RetriesExhausted

logger = logging.getLogger(__name__)

EXIT_KEY = 'x'
HELP_KEY = '?'


class ConsoleSession:
    """
    The interactive side of one game: where prompts are written and answers read.

    Use it as a context manager so it is released however the game ends. Streams
    passed in with owns_streams=True are closed on release; the process's own
    stdin/stdout are only flushed.
    """

    def __init__(self, input_stream=None, output_stream=None,
                 max_retries: Optional[int] = DEFAULT_MAX_RETRIES, owns_streams: bool = False):
        self.input = input_stream if input_stream is not None else sys.stdin
        self.output = output_stream if output_stream is not None else sys.stdout
        self.max_retries = max_retries
        self.owns_streams = owns_streams
        self.closed = False

    def __enter__(self) -> "ConsoleSession":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self):
        if self.closed:
            return
        self.closed = True
        self.output.flush()
        if self.owns_streams:
            self.input.close()
            self.output.close()
        logger.debug("Console session released")

    def _ensure_open(self):
        if self.closed:
            raise RuntimeError("Console session is closed")

    def display_message(self, text: str):
        self._ensure_open()
        print(text, file=self.output)

    def display_hmac(self, hmac_hex: str):
        self.display_message(f"HMAC: {hmac_hex}")

    def display_key_and_move(self, key_hex: str, move: int, name: str = "My choice"):
        self.display_message(f"{name}: {move} (KEY={key_hex})")

    def read_line(self, prompt: str) -> str:
        self._ensure_open()
        self.output.write(prompt)
        self.output.flush()
        line = self.input.readline()
        if not line:
            raise GameCancelled("Input stream closed.")
        return line.strip()

    @staticmethod
    def parse_choice(choice: str, options: list[str]) -> int:
        # isdigit() alone lets through characters such as '²' that int() rejects
        if choice.isascii() and choice.isdecimal():
            choice_int = int(choice)
            if choice_int < len(options):
                return choice_int
        raise InvalidSelection(choice)

    def get_user_choice(self, prompt: str, options: list[str],
                        on_help: Optional[Callable[[], None]] = None) -> int:
        """
        Show a numbered menu and return the index of the chosen option.
        'X' cancels the game and '?' runs on_help (when given) without using up a retry.
        """
        failures = 0
        while True:
            self.display_message(f"\n{prompt}")
            for i, option in enumerate(options):
                self.display_message(f" {i} - {option}")
            self.display_message(f"\n {EXIT_KEY.upper()} - Exit")
            if on_help is not None:
                self.display_message(f" {HELP_KEY} - Help")

            choice = self.read_line("Your selection: ").lower()

            if choice == EXIT_KEY:
                self.display_message("Exiting game. Goodbye!")
                raise GameCancelled("Player chose to exit.")
            if choice == HELP_KEY and on_help is not None:
                on_help()
                continue

            try:
                return self.parse_choice(choice, options)
            except InvalidSelection as e:
                failures += 1
                logger.info("%s (attempt %d)", e, failures)
                if self.max_retries is not None and failures >= self.max_retries:
                    self.display_message("Too many invalid answers. Exiting game.")
                    raise RetriesExhausted(failures)
                hint = f", '{HELP_KEY}'" if on_help is not None else ""
                self.display_message(f"Invalid choice. Please enter a listed number{hint} or '{EXIT_KEY.upper()}'.")
