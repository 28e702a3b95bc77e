"""Terminal prompts: numbered menus that can be cancelled."""

import sys

from spaced.models import CANCELLED


def terminal_prompt(message: str, options: list[str], stream=None):
    """Ask the user to pick one option.

    Accepts the option number or its exact text. Empty input, EOF or
    Ctrl+C cancel and return CANCELLED.
    """
    out = stream or sys.stdout
    print(message, file=out)
    for i, option in enumerate(options, 1):
        print(f"  {i}) {option}", file=out)
    while True:
        try:
            answer = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print(file=out)
            return CANCELLED
        if not answer:
            return CANCELLED
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        if answer in options:
            return answer
        print(f"Enter a number from 1 to {len(options)}, or press Enter to cancel.", file=out)
