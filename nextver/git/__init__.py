"""Git access for version resolution.

Usage:
    from nextver.git import Repository

    repo = Repository(Path("/path/to/repo"))
    match repo.list_all_tags():
        case Ok(tags):
            ...
        case Err(e):
            print(e.message)
"""

from nextver.git.backend import VcsBackend
from nextver.git.repository import GitError, Repository, parse_decorations

__all__ = [
    "GitError",
    "Repository",
    "VcsBackend",
    "parse_decorations",
]
