import re
import inspect
from functools import partial

from boltons.strutils import camel2under
from boltons.iterutils import unique


DEFAULT_MAX_DISTANCE = 2

_WHITESPACE_RE = re.compile(r'\s+')

# literal tokens that parse as false, everything else is true
FALSE_LITERALS = ('false', 'FALSE', 'False', '0')


def format_usage(text):
    "Collapse every run of whitespace in a usage string to a single space."
    return _WHITESPACE_RE.sub(' ', text)


def parse_bool(text):
    """Interpret command-line text as a boolean. Only the literals in
    ``FALSE_LITERALS`` are false, any other text (including malformed
    text like ``yes-please``) is true.
    """
    return text not in FALSE_LITERALS


def get_edit_distance(source, target):
    """Levenshtein distance between two strings, i.e., the minimum
    number of single-character insertions, deletions, and
    substitutions needed to turn *source* into *target*.

    >>> get_edit_distance('kitten', 'sitting')
    3
    """
    if source == target:
        return 0
    if not source:
        return len(target)
    if not target:
        return len(source)

    prev_row = list(range(len(target) + 1))
    for i, s_char in enumerate(source, 1):
        cur_row = [i]
        for j, t_char in enumerate(target, 1):
            cost = 0 if s_char == t_char else 1
            cur_row.append(min(prev_row[j] + 1,          # deletion
                               cur_row[j - 1] + 1,       # insertion
                               prev_row[j - 1] + cost))  # substitution
        prev_row = cur_row
    return prev_row[-1]


def get_max_distance(max_distance):
    "None (and anything non-numeric or non-finite) means the default."
    if isinstance(max_distance, bool) or not isinstance(max_distance, (int, float)):
        return DEFAULT_MAX_DISTANCE
    if max_distance != max_distance or max_distance in (float('inf'), float('-inf')):
        return DEFAULT_MAX_DISTANCE
    return max_distance


def guess_closest(target, candidates, max_distance=None, key=str):
    """Find the candidate closest to *target* by edit distance, as long
    as it's within *max_distance* edits (defaults to 2). A
    *max_distance* of zero or less disables guessing, and None is
    returned.

    On ties, the candidate appearing first in *candidates* wins.
    *key* turns each candidate into the text compared against
    *target*.
    """
    found = None
    best = get_max_distance(max_distance)
    if best <= 0:
        return None
    for candidate in candidates:
        distance = get_edit_distance(target, key(candidate))
        if distance > best:
            continue
        if found is None or distance < found[0]:
            found = (distance, candidate)
    return found[1] if found else None


async def maybe_await(value):
    "Await *value* if it's awaitable, otherwise hand it right back."
    if inspect.isawaitable(value):
        return await value
    return value


def get_default_name(func):
    """Derive a command name from a callable, for Commands created
    without an explicit name.
    """
    if isinstance(func, partial):
        func = func.func  # just one level of partial for now
    try:
        name = func.__name__  # most functions hit this
    except AttributeError:
        name = camel2under(func.__class__.__name__)  # callable instances, etc.
    return name.strip('_').lower().replace('_', '-')


def unwrap_text(text):
    all_grafs = []
    cur_graf = []
    for line in text.splitlines():
        line = line.strip()
        if line:
            cur_graf.append(line)
        else:
            all_grafs.append(' '.join(cur_graf))
            cur_graf = []
    if cur_graf:
        all_grafs.append(' '.join(cur_graf))
    return '\n'.join(all_grafs)


def docstring_to_usage(func):
    "First paragraph of a callable's docstring, as a single line."
    if isinstance(func, partial):
        func = func.func
    doc = getattr(func, '__doc__', None)
    if not doc:
        return ''

    unwrapped = unwrap_text(doc)
    try:
        ret = [g for g in unwrapped.splitlines() if g][0]
    except IndexError:
        ret = ''

    return ret


def format_nonexp_repr(obj, req_names=None, opt_names=None, opt_key=None):
    """Format a non-expression-style repr

    Some object reprs look like object instantiation, e.g., App(r=[], mw=[]).

    This makes sense for smaller, lower-level objects whose state
    roundtrips. But a lot of objects contain values that don't
    roundtrip, like functions and parent commands.

    For those objects, there is the non-expression style repr, which
    mimic's Python's default style to make a repr like this:

    <IntFlag name='port' short='p'>
    """
    cn = obj.__class__.__name__
    req_names = req_names or []
    opt_names = opt_names or []
    all_names = unique(req_names + opt_names)

    if opt_key is None:
        opt_key = lambda v: v is None
    assert callable(opt_key)

    items = [(name, getattr(obj, name, None)) for name in all_names]
    labels = ['%s=%r' % (name, val) for name, val in items
              if not (name in opt_names and opt_key(val))]
    if not labels:
        labels = ['id=%s' % id(obj)]
    ret = '<%s %s>' % (cn, ' '.join(labels))
    return ret
