from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple
import hashlib


@dataclass(frozen=True)
class Commit:
    id: str
    message: str
    parents: Tuple[str, ...]
    created_by_branch: str
    timestamp: datetime

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    @property
    def is_root(self) -> bool:
        return not self.parents


@dataclass
class CommitDraft:
    """Everything needed to mint a Commit except its id."""
    message: str
    parents: Tuple[str, ...]
    created_by_branch: str
    timestamp: datetime
    sequence: int = field(default=0)

    def serialize(self) -> bytes:
        lines = []
        for p in self.parents:
            lines.append(f"parent {p}".encode())
        lines.append(f"branch {self.created_by_branch}".encode())
        lines.append(f"timestamp {self.timestamp.isoformat()}".encode())
        lines.append(f"sequence {self.sequence}".encode())
        lines.append(b"")
        lines.append(self.message.encode())

        return b"\n".join(lines)

    def compute_oid(self) -> str:
        """SHA-1 over a git-style header plus the serialized draft."""
        data = self.serialize()
        header = f"commit {len(data)}".encode() + b"\x00"
        return hashlib.sha1(header + data).hexdigest()

    def build(self) -> Commit:
        return Commit(
            id=self.compute_oid(),
            message=self.message,
            parents=self.parents,
            created_by_branch=self.created_by_branch,
            timestamp=self.timestamp,
        )
