import logging
import secrets
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from fairdice.dice import Die
from fairdice.errors import CommitmentMismatch, GameCancelled, GameStateError
from fairdice.fair_random import CombinedResult, FairRandomProtocol
from fairdice.help_table import HelpTableGenerator
from fairdice.probability import compute
from fairdice.ui import ConsoleSession

logger = logging.getLogger(__name__)

USER = "user"
COMPUTER = "computer"


class GamePhase(Enum):
    INIT = "init"
    DETERMINE_FIRST = "determine_first"
    SELECT_DICE = "select_dice"
    ROLL = "roll"
    RESULT = "result"
    FINISHED = "finished"
    EXIT = "exit"


_TRANSITIONS = {
    GamePhase.INIT: {GamePhase.DETERMINE_FIRST},
    GamePhase.DETERMINE_FIRST: {GamePhase.SELECT_DICE},
    GamePhase.SELECT_DICE: {GamePhase.ROLL},
    GamePhase.ROLL: {GamePhase.RESULT},
    GamePhase.RESULT: {GamePhase.FINISHED},
    GamePhase.FINISHED: set(),
    GamePhase.EXIT: set(),
}


@dataclass(frozen=True)
class GameOutcome:
    first_mover: str
    player_die_index: int
    computer_die_index: int
    player_die: Die
    computer_die: Die
    player_roll: int
    computer_roll: int

    @property
    def winner(self) -> Optional[str]:
        """USER, COMPUTER, or None for a tie."""
        if self.player_roll > self.computer_roll:
            return USER
        if self.computer_roll > self.player_roll:
            return COMPUTER
        return None


# ==============================================================================
# Computer opponent
# ==============================================================================

def choose_computer_die(dice: list[Die], available: list[int], opponent_index: Optional[int] = None) -> int:
    """
    Pick the computer's die index from `available`.
    Picking first, any die is as good as another, so choose uniformly. Picking
    second, take the die most likely to beat the opponent's.
    """
    if not available:
        raise GameStateError("No dice left for the computer to choose from.")
    if opponent_index is None:
        return secrets.choice(available)

    matrix = compute(dice)
    best = max(matrix[i, opponent_index] for i in available)
    candidates = [i for i in available if matrix[i, opponent_index] == best]
    return secrets.choice(candidates)


# ==============================================================================
# Fair random rounds
# ==============================================================================

class FairInteraction:
    def __init__(self, protocol: FairRandomProtocol, ui: ConsoleSession):
        self.protocol = protocol
        self.ui = ui

    def fair_draw(self, range_: int, prompt: str, announce: str, name: str,
                  on_help: Optional[Callable[[], None]] = None) -> CombinedResult:
        """One commit/reveal round. Nothing secret is shown if the player exits before answering."""
        commitment = self.protocol.commit(range_)
        self.ui.display_message(f"{announce}.")
        self.ui.display_hmac(self.protocol.publish_digest(commitment))

        options = [str(i) for i in range(range_)]
        user_value = self.ui.get_user_choice(prompt, options, on_help=on_help)

        outcome = self.protocol.reveal(commitment, user_value)
        self.ui.display_key_and_move(outcome.key_hex, outcome.committed_value, name=name)
        if not self.protocol.verify(outcome.secret_key, outcome.committed_value, outcome.digest):
            raise CommitmentMismatch("Revealed key and value do not match the published HMAC.")
        return outcome

    def determine_first_player(self, on_help: Optional[Callable[[], None]] = None) -> bool:
        self.ui.display_message("\nLet's determine who makes the first move.")
        outcome = self.fair_draw(
            2,
            "Try to guess my selection.",
            "I selected a random value in the range 0..1",
            "My selection",
            on_help=on_help,
        )
        # a correct guess means (guess + selection) mod 2 == 0
        user_goes_first = outcome.result == 0
        logger.info("First move: %s", USER if user_goes_first else COMPUTER)
        return user_goes_first

    def roll(self, die: Die, on_help: Optional[Callable[[], None]] = None) -> int:
        num_faces = len(die)
        outcome = self.fair_draw(
            num_faces,
            f"Add your number modulo {num_faces}.",
            f"I selected a random value in the range 0..{num_faces - 1}",
            "My number",
            on_help=on_help,
        )
        self.ui.display_message(
            f"The fair number generation result is "
            f"{outcome.committed_value} + {outcome.counterpart_value} = {outcome.result} (mod {num_faces})."
        )
        return die.value_at(outcome.result)


# ==============================================================================
# Game controller
# ==============================================================================

class GameController:
    def __init__(self, dice: list[Die], ui: ConsoleSession, interaction: FairInteraction,
                 help_gen: HelpTableGenerator):
        self.all_dice = list(dice)
        self.ui = ui
        self.interaction = interaction
        self.help_gen = help_gen
        self.phase = GamePhase.INIT

    def _advance(self, phase: GamePhase):
        if phase not in _TRANSITIONS[self.phase]:
            raise GameStateError(f"Illegal transition {self.phase.name} -> {phase.name}")
        logger.debug("Phase %s -> %s", self.phase.name, phase.name)
        self.phase = phase

    def run(self) -> GameOutcome:
        if self.phase is not GamePhase.INIT:
            raise GameStateError("A game controller runs a single game.")
        self.ui.display_message("--- Welcome to the Non-Transitive Dice Game! ---")
        try:
            return self._play()
        except GameCancelled as e:
            logger.info("Game cancelled during %s: %s", self.phase.name, e)
            self.phase = GamePhase.EXIT
            raise

    def _play(self) -> GameOutcome:
        self._advance(GamePhase.DETERMINE_FIRST)
        user_goes_first = self.interaction.determine_first_player(on_help=self._show_help)

        self._advance(GamePhase.SELECT_DICE)
        player_index, computer_index = self._select_dice(user_goes_first)
        player_die = self.all_dice[player_index]
        computer_die = self.all_dice[computer_index]

        self._advance(GamePhase.ROLL)
        self.ui.display_message("\nIt's time for my roll.")
        computer_roll = self.interaction.roll(computer_die, on_help=self._show_help)
        self.ui.display_message(f"My roll result is {computer_roll}.")

        self.ui.display_message("\nIt's time for your roll.")
        player_roll = self.interaction.roll(player_die, on_help=self._show_help)
        self.ui.display_message(f"Your roll result is {player_roll}.")

        self._advance(GamePhase.RESULT)
        outcome = GameOutcome(
            first_mover=USER if user_goes_first else COMPUTER,
            player_die_index=player_index,
            computer_die_index=computer_index,
            player_die=player_die,
            computer_die=computer_die,
            player_roll=player_roll,
            computer_roll=computer_roll,
        )
        self._announce(outcome)
        self._advance(GamePhase.FINISHED)
        return outcome

    def _announce(self, outcome: GameOutcome):
        self.ui.display_message("\n--- Results ---")
        if outcome.winner == USER:
            self.ui.display_message(f"You win ({outcome.player_roll} > {outcome.computer_roll})!")
        elif outcome.winner == COMPUTER:
            self.ui.display_message(f"I win ({outcome.computer_roll} > {outcome.player_roll})!")
        else:
            self.ui.display_message(f"It's a tie ({outcome.player_roll} = {outcome.computer_roll})!")
        logger.info("Game finished: %s", outcome.winner or "tie")

    def _select_dice(self, user_goes_first: bool) -> tuple[int, int]:
        available = list(range(len(self.all_dice)))
        if user_goes_first:
            self.ui.display_message("You make the first move and choose your dice.")
            player_index = self._get_player_die_choice(available)
            available.remove(player_index)
            computer_index = choose_computer_die(self.all_dice, available, opponent_index=player_index)
            self.ui.display_message(f"I choose the [{self.all_dice[computer_index]}] dice.")
        else:
            self.ui.display_message("I make the first move and choose the dice.")
            computer_index = choose_computer_die(self.all_dice, available)
            available.remove(computer_index)
            self.ui.display_message(f"I choose the [{self.all_dice[computer_index]}] dice.")
            player_index = self._get_player_die_choice(available)

        if player_index == computer_index:
            raise GameStateError(f"Die {player_index} was given to both players.")
        return player_index, computer_index

    def _get_player_die_choice(self, available: list[int]) -> int:
        options = [f"[{self.all_dice[i]}]" for i in available]
        choice = self.ui.get_user_choice("Choose your dice:", options, on_help=self._show_help)
        player_index = available[choice]
        self.ui.display_message(f"You choose the [{self.all_dice[player_index]}] dice.")
        return player_index

    def _show_help(self):
        self.ui.display_message(self.help_gen.generate_table(self.all_dice))
