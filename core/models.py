"""Plain data holders shared by the core, the store and the API."""

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class Account:
    name: str
    secret: str
    id: Optional[int] = None


@dataclass(frozen=True)
class CodeResult:
    """Outcome of generating one account's code inside a batch."""

    name: str
    code: Optional[str] = None
    error: Optional[str] = None
    account_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def line(self) -> str:
        return f"{self.name}: {self.code}"


@dataclass
class Settings:
    enabled: bool = False
    dark_mode: bool = False
    interval: int = 30

    def to_dict(self) -> dict:
        return asdict(self)
