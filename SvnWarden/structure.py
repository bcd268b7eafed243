"""
Repository structure checks.

A structure spec describes which paths may be added to a repository. The raw
form, as written in the config file, is a recursive structure made of:

 list/tuple  the contents of a directory, as NAME_DEF, STRUCT_DEF pairs.
             A dict is accepted as an already paired, ordered directory.
 "FILE"      the component must be a file.
 "DIR"       the component must be a directory.
 int         positive: anything goes from here on. Otherwise: nothing does.

A NAME_DEF is a string (exact name), a compiled regex (searched in the name)
or an int else-clause. A positive else-clause matches any name not matched so
far and checks it against its STRUCT_DEF. A non-positive one rejects any such
name, using its STRUCT_DEF (a string, or None) as the help message.

Pairs are tried in order and the first NAME_DEF that matches wins.

Usage:
 spec = compile_structure([
     "trunk", ["README", "FILE", "lib", "DIR"],
     "branches", [re.compile(r"^[a-z]+-"), "DIR"],
 ])
 check(spec, "trunk/README")  # returns None
 check(spec, "trunk/foo.pl")  # raises StructureViolation
"""
import re
import logging
from collections import namedtuple

from SvnWarden.exceptions import (StructureError, StructureSyntaxError,
                                  StructureViolation)

log = logging.getLogger(__name__)

FILE = "FILE"
DIR = "DIR"

_REGEX_TYPE = type(re.compile(""))


## Name matchers

class Exact(namedtuple("Exact", "name")):
    __slots__ = ()

    def matches(self, name):
        return self.name == name


class Pattern(namedtuple("Pattern", "regex")):
    __slots__ = ()

    def matches(self, name):
        return self.regex.search(name) is not None


class Wildcard(namedtuple("Wildcard", "")):
    __slots__ = ()

    def matches(self, name):
        return True


class Deny(namedtuple("Deny", "message")):
    __slots__ = ()

    def matches(self, name):
        return True


## Structure nodes

class Directory(namedtuple("Directory", "rules")):
    "rules is a tuple of (matcher, spec) pairs, in declaration order"
    __slots__ = ()


class Kind(namedtuple("Kind", "kind")):
    __slots__ = ()


class Outcome(namedtuple("Outcome", "accept message")):
    __slots__ = ()


ACCEPT = Outcome(True, None)
REJECT = Outcome(False, None)

_NODE_TYPES = (Directory, Kind, Outcome)


def _is_number(value):
    return isinstance(value, int)


def _check_matcher(matcher):
    if isinstance(matcher, Exact) and isinstance(matcher.name, str):
        return
    if isinstance(matcher, Pattern) and isinstance(matcher.regex, _REGEX_TYPE):
        return
    if isinstance(matcher, Wildcard):
        return
    if isinstance(matcher, Deny) and (matcher.message is None or
                                      isinstance(matcher.message, str)):
        return
    raise StructureSyntaxError(
        "invalid name matcher %r in the structure spec, while checking"
        % (matcher,))


def _compile_name(lhs, rhs, parents):
    """
    Returns the (matcher, spec) pair for one NAME_DEF, STRUCT_DEF pair of a
    raw directory spec.
    """
    if isinstance(lhs, (Exact, Pattern, Wildcard, Deny)):
        _check_matcher(lhs)
        if isinstance(lhs, Deny):
            return (lhs, None)
        return (lhs, _compile(rhs, parents))
    if isinstance(lhs, str):
        return (Exact(lhs), _compile(rhs, parents))
    if isinstance(lhs, _REGEX_TYPE):
        return (Pattern(lhs), _compile(rhs, parents))
    if _is_number(lhs):
        if lhs > 0:
            return (Wildcard(), _compile(rhs, parents))
        if rhs is None or isinstance(rhs, str):
            return (Deny(rhs), None)
        raise StructureSyntaxError(
            "the right hand side of a number must be string, while checking")
    raise StructureSyntaxError(
        "the left hand side of arrays in the structure spec must be strings, "
        "numbers or compiled regexes, not %s, while checking"
        % type(lhs).__name__)


def _compile_directory(raw, parents):
    if isinstance(raw, Directory):
        if not isinstance(raw.rules, (list, tuple)):
            raise StructureSyntaxError(
                "the rules of a directory must be a tuple of pairs, "
                "while checking")
        pairs = []
        for rule in raw.rules:
            if not (isinstance(rule, tuple) and len(rule) == 2):
                raise StructureSyntaxError(
                    "invalid rule %r in the structure spec, while checking"
                    % (rule,))
            _check_matcher(rule[0])
            pairs.append(rule)
    elif isinstance(raw, dict):
        pairs = list(raw.items())
    else:
        if len(raw) % 2:
            raise StructureSyntaxError(
                "odd number of elements in the structure spec, "
                "while checking")
        pairs = list(zip(raw[::2], raw[1::2]))

    # a spec containing itself would never finish checking
    if id(raw) in parents:
        raise StructureSyntaxError(
            "the structure spec contains itself, while checking")
    parents.add(id(raw))
    try:
        rules = tuple(_compile_name(lhs, rhs, parents) for lhs, rhs in pairs)
    finally:
        parents.discard(id(raw))

    if isinstance(raw, Directory) and all(
            old[0] is new[0] and old[1] is new[1]
            for old, new in zip(raw.rules, rules)):
        return raw
    return Directory(rules)


def compile_structure(raw):
    """
    Builds an immutable structure spec out of its raw config form.

    Already built nodes are checked as well, down to their leaves.

    Raises StructureSyntaxError if any part of the spec is malformed, so a
    bad spec is caught once at load time instead of being half-applied.
    """
    return _compile(raw, set())


def _compile(raw, parents):
    if isinstance(raw, (Exact, Pattern, Wildcard, Deny)):
        raise StructureSyntaxError(
            "name matcher %r used as a structure spec, while checking"
            % (raw,))

    if isinstance(raw, Kind):
        if raw.kind not in (FILE, DIR):
            raise StructureSyntaxError(
                "unknown kind (%s), while checking" % (raw.kind,))
        return raw

    if isinstance(raw, Outcome):
        if raw.message is not None and not isinstance(raw.message, str):
            raise StructureSyntaxError(
                "the message of an outcome must be string, while checking")
        return raw

    if isinstance(raw, (Directory, dict, list, tuple)):
        return _compile_directory(raw, parents)

    if isinstance(raw, str):
        if raw in (FILE, DIR):
            return Kind(raw)
        raise StructureSyntaxError(
            "unknown string spec (%s), while checking" % raw)

    if _is_number(raw):
        return (REJECT, ACCEPT)[raw > 0]

    raise StructureSyntaxError(
        "invalid reference to a %s in the structure spec, "
        "while checking" % type(raw).__name__)


def split_path(path):
    """
    Splits a slash-separated path into its components, making it absolute
    first. Trailing empty components are kept, so "trunk/lib/" ends with ""
    and is told apart from the file "trunk/lib".
    """
    if not path.startswith("/"):
        path = "/" + path
    return path.split("/")


def _rejection(message):
    if message is not None:
        return "%s, while checking" % message
    return "invalid path"


def _check(spec, path):
    """
    Checks the components in path against spec. path[0] is the component
    the spec describes, the rest is what lies beneath it.

    Returns None if the path is allowed, or the reason why it is not.
    """
    if isinstance(spec, Kind):
        if spec.kind == DIR:
            if len(path) > 1:
                return None
            return "the component (%s) should be a DIR in" % path[0]
        if spec.kind != FILE:
            raise StructureSyntaxError(
                "unknown kind (%s), while checking" % (spec.kind,))
        if len(path) > 1:
            return "the component (%s) should be a FILE in" % path[0]
        return None

    if isinstance(spec, Outcome):
        if spec.accept:
            return None
        return _rejection(spec.message)

    if isinstance(spec, Directory):
        if len(path) < 2:
            return "the component (%s) should be a DIR in" % path[0]
        path = path[1:]
        # a directory added without any content
        if len(path) == 1 and path[0] == "":
            return None

        for matcher, subspec in spec.rules:
            if not matcher.matches(path[0]):
                continue
            if isinstance(matcher, Deny):
                return _rejection(matcher.message)
            return _check(subspec, path)
        return "the component (%s) is not allowed in" % path[0]

    raise StructureSyntaxError(
        "invalid node %r in the structure spec, while checking" % (spec,))


def validate(spec, path):
    """
    Checks a path, given as a list of components, against spec.

    A leading empty component stands for the repository root and is added
    if missing. A trailing empty component marks a directory.

    Returns None if the path is allowed. Raises StructureViolation if it is
    not, or StructureSyntaxError if the spec is malformed.
    """
    path = list(path)
    if not path or path[0] != "":
        path.insert(0, "")
    display = "/".join(path)

    try:
        spec = compile_structure(spec)
        reason = _check(spec, path)
    except StructureSyntaxError as e:
        raise StructureSyntaxError(e.reason, display)

    if reason is not None:
        raise StructureViolation(reason, display)


def check(spec, path):
    "Checks a single slash-separated path, as listed by 'svn ls'"
    validate(spec, split_path(path))


def check_paths(spec, paths):
    """
    Checks every path in paths against spec and returns the list of errors,
    one "<reason>: <path>" string per offending path. All paths are checked,
    even after the first failure.
    """
    errors = []
    for path in paths:
        try:
            validate(spec, split_path(path))
        except StructureError as e:
            log.debug("structure check failed for %s: %s", path, e.reason)
            errors.append("%s: %s" % (e.reason, path))
        else:
            log.debug("structure check passed for %s", path)
    return errors
