"""
Console I/O for the messenger client.

- Render menus
- Read numeric choices, free text and y/n answers
- Print lines to standard output, failures to standard error
"""

import getpass
import sys
from typing import Optional, Sequence, Tuple

MenuEntries = Sequence[Tuple[int, str]]

SEPARATOR = "........................."


class ConsoleView:
    """Line-oriented view on stdin/stdout."""

    def prompt(self, question: str) -> str:
        return input(question)

    def prompt_secret(self, question: str) -> str:
        """Read a value without echoing it when stdin is a terminal.

        Redirected input is read line by line like every other answer.
        """
        if not sys.stdin.isatty():
            return self.prompt(question)
        return getpass.getpass(question)

    def show(self, text: str = "", end: str = "\n") -> None:
        print(text, end=end)

    def show_error(self, text: str) -> None:
        print(text, file=sys.stderr)

    def render_menu(
        self,
        title: str,
        entries: MenuEntries,
        footer: MenuEntries = (),
        rule: bool = True,
    ) -> None:
        """Print a titled menu; footer entries go below a dotted separator."""
        self.show(title)
        if rule:
            self.show("---------")
        for number, label in entries:
            self.show(f"{number}. {label}")
        if footer:
            self.show(SEPARATOR)
            for number, label in footer:
                self.show(f"{number}. {label}")

    def read_choice(self, question: str = "Please make your choice: ") -> int:
        """Ask until the user types an integer."""
        while True:
            raw = self.prompt(question).strip()
            try:
                return int(raw)
            except ValueError:
                self.show("Your input is invalid!")

    def ask_yes_no(self, question: str) -> Optional[bool]:
        """True for 'y', False for 'n', None for anything else."""
        answer = self.prompt(question).strip().lower()
        if answer == "y":
            return True
        if answer == "n":
            return False
        return None
