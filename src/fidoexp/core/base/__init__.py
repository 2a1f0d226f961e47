from fidoexp.core.base.agent import Agent, Transceiver
from fidoexp.core.base.chaining import ChainState, ResponseChain
from fidoexp.core.base.iso7816 import ISO7816
from fidoexp.core.base.message import Message, Result
from fidoexp.core.base.terminal import Terminal

__all__ = [
    "Agent",
    "ChainState",
    "ISO7816",
    "Message",
    "Result",
    "ResponseChain",
    "Terminal",
    "Transceiver",
]
