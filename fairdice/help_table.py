from tabulate import tabulate

from fairdice.dice import Die
from fairdice.probability import UNDEFINED, compute


class HelpTableGenerator:
    @staticmethod
    def generate_table(all_dice: list[Die]) -> str:
        matrix = compute(all_dice)
        headers = ["User v PC >"] + [str(d) for d in all_dice]
        table_data = []
        for user_die, probabilities in zip(all_dice, matrix.rows()):
            row = [str(user_die)]
            for prob in probabilities:
                row.append("-" if prob is UNDEFINED else f"{float(prob):.4f}")
            table_data.append(row)

        intro = (
            "\n--- Win Probability Table ---\n"
            "Probability that the User's die (rows) beats the PC's die (columns).\n"
            "A die cannot be played against itself, so the diagonal is empty.\n"
        )
        return intro + tabulate(table_data, headers=headers, tablefmt="grid", disable_numparse=True)
