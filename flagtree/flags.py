import weakref

from flagtree.errors import CommandError
from flagtree.flag import Flag, FLAG_TYPE_MAP
from flagtree.utils import guess_closest


class Flags(object):
    """The set of flags a single Command accepts. Every Command owns
    exactly one, and passes it to its *prepare* callback so flags can
    be declared with the typed factory methods::

        def prepare(flags, cmd):
            port = flags.uint('port', short='p', default=8080,
                              usage='port to listen on')
            ...

    Flags are never shared between commands. A subcommand sees only
    its own flags, never its parent's.

    Iterating a Flags yields its flags sorted by long name, the order
    used for help output.
    """
    def __init__(self, cmd=None):
        self._cmd_ref = weakref.ref(cmd) if cmd is not None else None
        self._long_map = {}
        self._short_map = {}
        self._sorted_flags = None

    @property
    def cmd(self):
        return self._cmd_ref() if self._cmd_ref is not None else None

    @property
    def use(self):
        cmd = self.cmd
        return cmd.use() if cmd is not None else ''

    def find(self, name, short=False):
        "Look up a flag by long name, or by shorthand if *short* is True."
        if short:
            return self._short_map.get(name)
        return self._long_map.get(name)

    def guess(self, name, max_distance=None):
        """Returns the flag whose long name is closest to *name*, within
        *max_distance* edits, or None.
        """
        return guess_closest(name, self._long_map.values(), max_distance,
                             key=lambda flag: flag.name)

    def get_flags(self):
        flags = self._sorted_flags
        if flags is None or len(flags) != len(self._long_map):
            flags = sorted(self._long_map.values(), key=lambda flag: flag.name)
            self._sorted_flags = flags
        return list(flags)

    def __iter__(self):
        return iter(self.get_flags())

    def __len__(self):
        return len(self._long_map)

    def __contains__(self, name):
        return name in self._long_map

    def reset(self):
        for flag in self._long_map.values():
            flag.reset()

    def add(self, *flags):
        """Register one or more Flag instances. Raises a CommandError if a
        long name is already taken, or if a shorthand is already used
        by another flag.
        """
        for flag in flags:
            if not isinstance(flag, Flag):
                raise CommandError('expected Flag instance, not: %r' % (flag,))
            name = flag.name
            if name in self._long_map:
                raise CommandError('%s flag redefined: %s' % (self.use, name))
            short = flag.short
            if short:
                found = self._short_map.get(short)
                if found is not None:
                    raise CommandError('unable to redefine %r shorthand in "%s" flagset:'
                                       ' it\'s already used for "%s" flag'
                                       % (short, self.use, found.name))
                self._short_map[short] = flag
            self._long_map[name] = flag
        return

    def define(self, kind, *a, **kw):
        """Construct a flag of the type tagged *kind* (e.g., ``'uint'`` or
        ``'string[]'``), register it, and return it.
        """
        try:
            flag_type = FLAG_TYPE_MAP[kind]
        except KeyError:
            raise CommandError('unknown flag kind %r, expected one of: %s'
                               % (kind, ', '.join(sorted(FLAG_TYPE_MAP))))
        flag = flag_type(*a, **kw)
        self.add(flag)
        return flag

    def string(self, name, **kw):
        return self.define('string', name, **kw)

    def strings(self, name, **kw):
        return self.define('string[]', name, **kw)

    def number(self, name, **kw):
        return self.define('number', name, **kw)

    def numbers(self, name, **kw):
        return self.define('number[]', name, **kw)

    def int(self, name, **kw):
        return self.define('int', name, **kw)

    def ints(self, name, **kw):
        return self.define('int[]', name, **kw)

    def uint(self, name, **kw):
        return self.define('uint', name, **kw)

    def uints(self, name, **kw):
        return self.define('uint[]', name, **kw)

    def bigint(self, name, **kw):
        return self.define('bigint', name, **kw)

    def bigints(self, name, **kw):
        return self.define('bigint[]', name, **kw)

    def bool(self, name, **kw):
        return self.define('bool', name, **kw)

    def bools(self, name, **kw):
        return self.define('bool[]', name, **kw)

    def __repr__(self):
        cn = self.__class__.__name__
        return '<%s use=%r names=%r>' % (cn, self.use, [f.name for f in self.get_flags()])
