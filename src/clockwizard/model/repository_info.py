# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict


class RepositoryInfo(TypedDict):
    branch: Optional[str]
    ticket_id: Optional[str]
    commit: Optional[str]
    has_changes: bool
    remote: Optional[str]
