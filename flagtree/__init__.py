from flagtree.flag import (Flag,
                           StringFlag,
                           StringsFlag,
                           NumberFlag,
                           NumbersFlag,
                           IntFlag,
                           IntsFlag,
                           UintFlag,
                           UintsFlag,
                           BigintFlag,
                           BigintsFlag,
                           BoolFlag,
                           BoolsFlag)

from flagtree.errors import (FlagtreeException,
                             CommandError,
                             CommandLineError,
                             ParseCommandError,
                             FlagError,
                             UnknownFlag,
                             InvalidFlagArgument,
                             MissingFlagArgument,
                             UnknownCommand)

from flagtree.flags import Flags
from flagtree.parser import Parser, ParseResult, Runner, RunMode, parse_command
from flagtree.command import Command
from flagtree.helpers import HelpFormatter
