import logging
import sys

from fairdice.config import load_settings
from fairdice.dice import DiceParser
from fairdice.errors import ConfigurationError, GameCancelled
from fairdice.fair_random import FairRandomProtocol
from fairdice.game import FairInteraction, GameController
from fairdice.help_table import HelpTableGenerator
from fairdice.ui import ConsoleSession

logger = logging.getLogger("fairdice")


def main(argv=None):
    """Run one game with the dice given on the command line. Exits with 1 on bad configuration."""
    try:
        # Dynamically determine the command used to invoke the script
        if 'py.exe' in sys.executable.lower():
            ConfigurationError.set_invocation_command('py')
        else:
            ConfigurationError.set_invocation_command('python')

        settings = load_settings()
        logging.basicConfig(
            level=settings.log_level,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        args = sys.argv[1:] if argv is None else argv
        dice = DiceParser.parse(args)
    except ConfigurationError as e:
        logger.debug("Configuration rejected: %s", e.message)
        print(e, file=sys.stderr)
        sys.exit(1)

    with ConsoleSession(max_retries=settings.max_retries) as ui:
        help_gen = HelpTableGenerator()
        interaction = FairInteraction(FairRandomProtocol(), ui)
        controller = GameController(dice, ui, interaction, help_gen)
        try:
            controller.run()
        except GameCancelled as e:
            logger.debug("Left the game early: %s", e)
        except KeyboardInterrupt:
            ui.display_message("\nGame interrupted. Goodbye!")


if __name__ == "__main__":
    main()
