from dataclasses import dataclass
from typing import Literal, Protocol


@dataclass(frozen=True)
class ChatMessage:
    role: Literal["user"]
    content: str


class AIClient(Protocol):
    async def complete(self, prompt: str) -> str: ...
