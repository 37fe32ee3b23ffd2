# SPDX-License-Identifier: MIT

from clockwizard.cleanup import register_cleanup
from clockwizard.initialize import initialize
from clockwizard.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
