"""CLI command handlers.

Each handler validates its flags, wires the remote clients and runs one to
three calls in sequence. Errors are printed and turned into the sentinel `0`.
"""

from cli.commands.msg_check import MsgCheck
from cli.commands.p2wdb_json import P2WDBJson
from cli.commands.p2wdb_pin import P2WDBPin
from cli.commands.token_update import TokenUpdate

__all__ = [
    "MsgCheck",
    "P2WDBJson",
    "P2WDBPin",
    "TokenUpdate",
]
