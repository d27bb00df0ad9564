"""Widget exports for agent_chat UI."""

from .code_block import CodeBlockView
from .conversation import ConversationView
from .input_box import InputBox
from .message import MessageBubble, PendingBubble, StreamingBubble
from .welcome import WelcomePanel

__all__ = [
    "CodeBlockView",
    "ConversationView",
    "InputBox",
    "MessageBubble",
    "PendingBubble",
    "StreamingBubble",
    "WelcomePanel",
]
