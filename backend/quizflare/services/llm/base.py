from dataclasses import dataclass
from typing import Protocol, Sequence


@dataclass(frozen=True)
class Attachment:
    mime_type: str
    base64_data: str

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


class LLMClient(Protocol):
    def generate_answer(
        self,
        query: str,
        context: str,
        attachments: Sequence[Attachment] = (),
    ) -> str:
        ...
