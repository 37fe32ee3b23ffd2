# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer.core

WORKFLOW_ORDER = [
    "start, begin",
    "stop, end",
    "log, l",
    "today, t",
    "week, w",
    "reports, r",
    "create-task, ct",
    "list-tasks, lt",
    "status, info",
    "configure, config",
]


class WorkflowOrderedGroup(typer.core.TyperGroup):
    """
    Command group for names that carry comma-separated aliases, e.g.
    "start, begin". Any alias resolves to the registered command and
    help lists commands in the order a working day uses them.
    """

    _ALIAS_SEPARATOR = re.compile(r"\s*,\s*")

    def resolve_alias(self, cmd_name: str) -> str:
        for registered_name in self.commands:
            if cmd_name in self._ALIAS_SEPARATOR.split(registered_name):
                return registered_name
        return cmd_name

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.resolve_alias(cmd_name))

    def list_commands(self, ctx: click.Context) -> list[str]:
        ordered = [name for name in WORKFLOW_ORDER if name in self.commands]
        return ordered + [name for name in self.commands if name not in ordered]
