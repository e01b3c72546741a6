from __future__ import annotations

from dataclasses import dataclass

from dbar.core.config import DEFAULT_PLACEHOLDER


@dataclass(frozen=True)
class CommandTemplate:
    """
    Shell command with zero or more placeholder tokens.
    The template is never validated; the shell rejects bad quoting at run time.
    """
    text: str
    placeholder: str = DEFAULT_PLACEHOLDER

    @property
    def has_placeholder(self) -> bool:
        return self.placeholder in self.text

    def render(self, value_text: str) -> str:
        if not self.has_placeholder:
            return self.text
        return self.text.replace(self.placeholder, value_text)
