# SPDX-License-Identifier: MIT

import logging
import re
import shutil
import subprocess
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from clockwizard.model.repository_info import RepositoryInfo

logger = logging.getLogger(__name__)

TICKET_ID_PATTERN = re.compile(r"([A-Z]+[-_]\d+)")


class GitCommand(Enum):
    CURRENT_BRANCH = 0
    GIT_DIR = 1
    LIST_BRANCHES = 2
    SHORT_COMMIT = 3
    STATUS = 4
    REMOTE_URL = 5


class Git:
    """Read-only queries against the repository a command is run from."""

    def is_git_repo(self, folder: Path) -> bool:
        if not self.__is_git_available():
            return False
        return self.__execute_git_command(GitCommand.GIT_DIR, folder) is not None

    def current_branch(self, folder: Path) -> Optional[str]:
        if not self.__is_git_available():
            return None
        branch = self.__execute_git_command(GitCommand.CURRENT_BRANCH, folder)
        # Detached HEAD has no branch name
        if not branch or branch == "HEAD":
            return None
        return branch

    def branches(self, folder: Path) -> list[str]:
        if not self.__is_git_available():
            return []
        output = self.__execute_git_command(GitCommand.LIST_BRANCHES, folder)
        if not output:
            return []
        names = []
        for line in output.splitlines():
            name = re.sub(r"^\*\s+", "", line.strip())
            name = re.sub(r"^remotes/[^/]+/", "", name)
            if name:
                names.append(name)
        return names

    def repository_info(self, folder: Path) -> Optional[RepositoryInfo]:
        """Branch, ticket, short commit, dirty flag and origin url; None outside a repository."""
        if not self.is_git_repo(folder):
            return None
        branch = self.current_branch(folder)
        return {
            "branch": branch,
            "ticket_id": extract_ticket_id(branch),
            "commit": self.__execute_git_command(GitCommand.SHORT_COMMIT, folder) or None,
            "has_changes": bool(self.__execute_git_command(GitCommand.STATUS, folder)),
            "remote": self.__execute_git_command(GitCommand.REMOTE_URL, folder) or None,
        }

    def __is_git_available(self) -> bool:
        if shutil.which("git") is None:
            logger.debug("git is not available on the system")
            return False
        return True

    def __execute_git_command(self, command: GitCommand, folder: Path) -> Optional[str]:
        git_command = ["git", "-C", str(folder.resolve())]

        match command:
            case GitCommand.CURRENT_BRANCH:
                git_command += ["rev-parse", "--abbrev-ref", "HEAD"]
            case GitCommand.GIT_DIR:
                git_command += ["rev-parse", "--git-dir"]
            case GitCommand.LIST_BRANCHES:
                git_command += ["branch", "-a"]
            case GitCommand.SHORT_COMMIT:
                git_command += ["rev-parse", "--short", "HEAD"]
            case GitCommand.STATUS:
                git_command += ["status", "--porcelain"]
            case GitCommand.REMOTE_URL:
                git_command += ["remote", "get-url", "origin"]

        result = subprocess.run(git_command, text=True, capture_output=True)
        if result.returncode != 0:
            logger.debug("%s failed: %s", " ".join(git_command), result.stderr.strip())
            return None
        return result.stdout.strip()


def extract_ticket_id(branch: Optional[str]) -> Optional[str]:
    """First ticket-like id in a branch name, e.g. feature/CAM-451-login -> CAM-451."""
    if not branch:
        return None
    match = TICKET_ID_PATTERN.search(branch)
    return match.group(1) if match else None


def branch_tickets(branches: Iterable[str]) -> list[str]:
    tickets: list[str] = []
    for branch in branches:
        ticket_id = extract_ticket_id(branch)
        if ticket_id is not None and ticket_id not in tickets:
            tickets.append(ticket_id)
    return tickets

