# SPDX-License-Identifier: MIT

from typing import Optional

from rich import print
from rich.padding import Padding

from clockwizard.state import get_show_header


def header(title: str, sub_header: Optional[str] = None) -> None:
    """Print the application header.

    Args:
        title: The command being run, e.g. "start timer"
        sub_header: Optional detail line such as the reported period
    """
    if not get_show_header():
        return

    print(Padding("[dark_orange]clockwizard[/dark_orange]", (1, 0, 0, 1)))
    print(Padding(f"[plum1]{title}[/plum1]", (0, 1)))
    if sub_header is not None:
        print(Padding(f"[sandy_brown]{sub_header}[/sandy_brown]", (0, 1)))
    print()
