"""Core type definitions"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ResolvedExecutable:
    """An executable path and the version it reports for --version"""
    version: str
    path: str


@dataclass(frozen=True)
class DownloadDescriptor:
    """Where a release archive lives and what it is called"""
    url: str
    file_name: str
