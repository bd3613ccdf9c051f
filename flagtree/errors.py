class FlagtreeException(Exception):
    """The basest base exception flagtree has. Rarely directly
    instantiated if ever, but useful for catching.
    """
    pass


class CommandError(FlagtreeException, ValueError):
    """Raised while building a command tree: invalid command or flag
    names, duplicate flags and shorthands, duplicate subcommands, and
    commands added to more than one parent.

    These are programming errors, raised immediately at construction,
    long before any argv is parsed.
    """
    pass


class CommandLineError(FlagtreeException, SystemExit):
    def __init__(self, msg, code=1):
        SystemExit.__init__(self, msg)
        self.code = code


class ParseCommandError(FlagtreeException):
    """A base exception used for all errors raised during argument
    parsing.

    The string form of the exception is a complete, ready-to-print
    block, including usage information for the command being parsed
    when the error occurred. The one-line reason is available as
    *message*, and the closest known match, if any, as *suggestion*.

    Many subtypes have a ".from_parse()" classmethod that creates an
    exception message from the values available during the parse
    process.
    """
    def __init__(self, msg, cmd=None, message=None, suggestion=None):
        super(ParseCommandError, self).__init__(msg)
        self.cmd = cmd
        self.message = message if message is not None else msg
        self.suggestion = suggestion


def _format_flag_error(cmd, message, suggestion=None):
    lines = [message, cmd.get_help_text(err=True), '', 'Error: ' + message]
    if suggestion:
        lines.extend(['', 'Did you mean this?', '  ' + suggestion, ''])
    return '\n'.join(lines)


class FlagError(ParseCommandError):
    """Base for all errors caused by a flag on the command line: unknown
    flags, missing flag arguments, and flag arguments which failed to
    convert or validate.
    """
    @classmethod
    def from_parse(cls, cmd, message, suggestion=None):
        msg = _format_flag_error(cmd, message, suggestion)
        return cls(msg, cmd=cmd, message=message, suggestion=suggestion)


class UnknownFlag(FlagError):
    """
    Raised when an unrecognized flag is passed.
    """
    @classmethod
    def from_long(cls, cmd, name, arg, suggestion=None):
        message = 'unknown flag: "%s" in %s' % (name, arg)
        mean = '--' + suggestion if suggestion else None
        return cls.from_parse(cmd, message, mean)

    @classmethod
    def from_short(cls, cmd, char, arg):
        return cls.from_parse(cmd, 'unknown shorthand flag: "%s" in %s' % (char, arg))


class InvalidFlagArgument(FlagError):
    """Raised when the argument passed to a flag fails to convert, is not
    one of the flag's allowed values, or is rejected by the flag's
    verify hook. The underlying exception is kept as ``__cause__``.
    """
    @classmethod
    def from_exc(cls, cmd, flag_label, arg, value, exc, suggestion=None):
        message = ('[%s] invalid argument "%s" for %s flag: %s'
                   % (arg, value, flag_label, exc))
        return cls.from_parse(cmd, message, suggestion)


class MissingFlagArgument(FlagError):
    """
    Raised when the argument list ends while a flag still expects a value.
    """
    @classmethod
    def from_last(cls, cmd, flag_label, last_arg):
        message = 'flag needs an argument: %s in %s' % (flag_label, last_arg)
        return cls.from_parse(cmd, message)


class UnknownCommand(ParseCommandError):
    """
    Raised when an unrecognized subcommand is passed.
    """
    @classmethod
    def from_parse(cls, cmd, arg, suggestion=None):
        use = cmd.use()
        message = 'unknown command: "%s" for "%s"' % (arg, use)
        lines = [message, 'Run "%s --help" for usage.' % use, 'Error: ' + message]
        if suggestion:
            lines.extend(['', 'Did you mean this?', '  ' + suggestion, ''])
        return cls('\n'.join(lines), cmd=cmd, message=message, suggestion=suggestion)
