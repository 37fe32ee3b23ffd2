# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict


class Issue(TypedDict):
    key: str
    project_key: str
    summary: str
    status: Optional[str]
    assignee: Optional[str]


class TicketInfo(TypedDict):
    ticket_id: str
    project_key: Optional[str]
    summary: Optional[str]
    description: str
    issue: Optional[Issue]
