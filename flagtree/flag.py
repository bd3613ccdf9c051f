import re
import json
import math

from flagtree.errors import CommandError
from flagtree.utils import (format_usage,
                            parse_bool,
                            guess_closest,
                            maybe_await,
                            format_nonexp_repr)


MAX_SAFE_INTEGER = 2 ** 53 - 1

_INT_RE = re.compile(r'^\s*[-+]?\d+\s*\Z')
_BIGINT_PREFIXED_RE = re.compile(r'^\s*(0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+)\s*\Z')

# shorthand characters which would be ambiguous on the command line
_INVALID_SHORTS = ('=', '-', "'", '"')


def _same_value(left, right):
    # True == 1 in Python, but a bool allow-list entry should only
    # ever match a bool
    return left == right and isinstance(left, bool) == isinstance(right, bool)


def _is_empty_default(value):
    if value is None:
        return True
    if isinstance(value, (list, tuple, str, bool)):
        return not value
    try:
        return value == 0
    except Exception:
        return False


class Flag(object):
    """The Flag object represents one option a Command accepts on the
    command line, like ``--port 8080`` or ``-v``. Flag itself is
    abstract; use one of the concrete types below, usually through the
    factory methods on a command's :class:`~flagtree.flags.Flags`.

    Args:
       name (str): The long name of the flag, used as ``--name``. Must
          be non-empty and must not contain ``=``.
       short (str): An optional single-character shorthand, used as
          ``-s``. Cannot be one of ``= - ' "``.
       default: The value read from the flag when it was not passed on
          the command line. Defaults to ``None``.
       usage (str): A one-line description used in help output. Runs
          of whitespace are collapsed to a single space.
       values (list): An optional allow-list. When set, a parsed value
          must equal one of these, or the argument is rejected.
       verify (callable): An optional hook called with every parsed
          value. Raise to reject the value. May be a coroutine
          function, in which case the parse waits for it.

    A Flag holds the value parsed for it during the current parse. Its
    :attr:`value` falls back to *default* until the flag is parsed,
    and the parser resets it at the start of every parse of the
    owning command.
    """
    kind = None
    is_array = False

    def __init__(self, name, short=None, default=None, usage=None,
                 values=None, verify=None):
        if not isinstance(name, str) or not name:
            raise CommandError('flag name must be a non-empty string, not: %r' % (name,))
        if '=' in name:
            raise CommandError("flag name cannot contain '=': %r" % name)
        self.name = name

        short = short or ''
        if not isinstance(short, str):
            raise CommandError('flag short must be a string or None, not: %r' % (short,))
        if len(short) > 1:
            raise CommandError('flag short can only be one character, not: %r' % short)
        if short in _INVALID_SHORTS:
            raise CommandError("flag short cannot be one of = - ' \", not: %r" % short)
        self.short = short

        usage = usage or ''
        if not isinstance(usage, str):
            raise CommandError('flag usage must be a string or None, not: %r' % (usage,))
        self.usage = format_usage(usage)

        if values is not None:
            if not isinstance(values, (list, tuple)):
                raise CommandError('flag values must be a list, not: %r' % (values,))
            values = list(values)
        self.values = values

        if verify is not None and not callable(verify):
            raise CommandError('flag verify must be callable, not: %r' % (verify,))
        self._verify = verify

        self.default = default
        self._value = None

    @property
    def value(self):
        "The parsed value if there is one, else the default."
        if self._value is not None:
            return self._value
        return self.default

    def reset(self):
        "Forget the parsed value. The default is still there to fall back on."
        self._value = None

    def is_bool(self):
        return False

    def convert(self, text):
        "Turn argument text into a value of this flag's type."
        raise NotImplementedError('%s has no conversion' % self.__class__.__name__)

    async def verify(self, value):
        """Check a converted value against the allow-list, then against the
        verify hook. A value missing from the allow-list is rejected
        without ever calling the hook.
        """
        if self.values is not None:
            if not any(_same_value(value, v) for v in self.values):
                raise ValueError('value is not in the list of available values')
        if self._verify is not None:
            await maybe_await(self._verify(value))

    async def parse(self, text):
        value = self.convert(text)
        await self.verify(value)
        if not self.is_array:
            self._value = value
            return
        if self._value is None:
            self._value = []
        self._value.append(value)

    def default_string(self):
        if _is_empty_default(self.default):
            return ''
        return '(default %s)' % json.dumps(self.default)

    def values_string(self):
        if not self.values:
            return ''
        return '(values %s)' % json.dumps(self.values)

    def guess(self, text, max_distance=None):
        "The allowed value closest to *text*, if any is close enough."
        if not self.values:
            return None
        return guess_closest(text, [str(v) for v in self.values], max_distance)

    def __repr__(self):
        return format_nonexp_repr(self, ['name'], ['short', 'default', 'values'],
                                  opt_key=lambda v: v is None or v == '')


class StringFlag(Flag):
    kind = 'string'

    def convert(self, text):
        return text


class StringsFlag(StringFlag):
    kind = 'string[]'
    is_array = True


class NumberFlag(Flag):
    kind = 'number'

    def convert(self, text):
        if '_' in text:
            raise ValueError('invalid number: %r' % text)
        value = float(text)
        if math.isnan(value):
            raise ValueError('is nan')
        return value


class NumbersFlag(NumberFlag):
    kind = 'number[]'
    is_array = True


class IntFlag(Flag):
    kind = 'int'

    def convert(self, text):
        if not _INT_RE.match(text):
            raise ValueError('invalid integer: %r' % text)
        value = int(text)
        if abs(value) > MAX_SAFE_INTEGER:
            raise ValueError('is not safe integer')
        return value


class IntsFlag(IntFlag):
    kind = 'int[]'
    is_array = True


class UintFlag(Flag):
    kind = 'uint'

    def convert(self, text):
        if not _INT_RE.match(text):
            raise ValueError('invalid unsigned integer: %r' % text)
        value = int(text)
        if value < 0 or value > MAX_SAFE_INTEGER:
            raise ValueError('is not safe unsigned integer')
        return value


class UintsFlag(UintFlag):
    kind = 'uint[]'
    is_array = True


class BigintFlag(Flag):
    """Arbitrary-precision integer, no range limit. Besides decimal,
    accepts ``0x``, ``0o``, and ``0b`` prefixed text.
    """
    kind = 'bigint'

    def convert(self, text):
        if _INT_RE.match(text):
            return int(text)
        if _BIGINT_PREFIXED_RE.match(text):
            return int(text.strip(), 0)
        raise ValueError('invalid big integer: %r' % text)


class BigintsFlag(BigintFlag):
    kind = 'bigint[]'
    is_array = True


class BoolFlag(Flag):
    """A flag which doesn't need an argument: ``--verbose`` alone sets
    it true. An attached value (``--verbose=false``) is read with
    :func:`~flagtree.utils.parse_bool`.
    """
    kind = 'bool'

    def is_bool(self):
        return True

    def convert(self, text):
        return parse_bool(text)


class BoolsFlag(BoolFlag):
    kind = 'bool[]'
    is_array = True


FLAG_TYPES = (StringFlag, StringsFlag,
              NumberFlag, NumbersFlag,
              IntFlag, IntsFlag,
              UintFlag, UintsFlag,
              BigintFlag, BigintsFlag,
              BoolFlag, BoolsFlag)

FLAG_TYPE_MAP = dict([(ft.kind, ft) for ft in FLAG_TYPES])
