"""
Command interface shared by every CLI sub-command.
"""

import argparse
import sys
from typing import Tuple

from kafkadrain.utils.config import Config


class Command:
    """
    Base class for sub-commands.
    
    Subclasses set ``name`` (``<category>_<action>``), ``description`` and
    optionally ``aliases``, then implement ``add_arguments`` and ``run``.
    """
    
    name: str = ""
    aliases: Tuple[str, ...] = ()
    banner: str = ""
    description: str = ""
    
    @classmethod
    def category(cls) -> str:
        """Category derived from the command name prefix."""
        return cls.name.split("_")[0]
    
    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Register command-specific arguments."""
        pass
    
    def run(self, args: argparse.Namespace, config: Config) -> int:
        """
        Execute the command.
        
        Returns:
            Process exit status
        """
        raise NotImplementedError
    
    def error(self, message: str) -> None:
        """Report an error to the operator."""
        print(f"ERROR: {message}", file=sys.stderr)
