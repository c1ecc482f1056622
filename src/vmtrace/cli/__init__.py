"""
CLI module for vmtrace.

Command implementations:
- render: print a trace dump written by the node
- trace: fetch and print the call trace of a mined transaction
- contracts: show the system contracts used per execution mode
"""

from .main import main
from .render import render_command
from .trace import trace_command
from .contracts import list_contracts_command

__all__ = [
    'main',
    'render_command',
    'trace_command',
    'list_contracts_command',
]
