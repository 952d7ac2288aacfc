from pydantic import BaseModel
from typing import Any, List

class ProxyChatCommand(BaseModel):
    """The part of a caller's body that is forwarded to Perplexity, unchanged."""
    messages: List[Any]
    model: Any
