"""Command-line option scanning in the style of GNU getopt_long."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence


class ArgKind(enum.IntEnum):
    """Whether a long option takes an argument."""

    NONE = 0
    REQUIRED = 1
    OPTIONAL = 2


@dataclass(frozen=True)
class LongOption:
    """A long option: its name, argument kind and the value reported for it."""

    name: str
    has_arg: ArgKind
    val: Hashable


@dataclass(frozen=True)
class ParsedOption:
    """One scanned option.

    ``opt`` is the option character for a short option, ``LongOption.val`` for
    a long option, ``'?'`` for an unknown or ambiguous option and ``':'`` when
    a required argument is missing.  ``longidx`` is the index of the matched
    long option, or -1.
    """

    opt: Hashable
    arg: Optional[str]
    longidx: int = -1


class OptionScanner:
    """Iterate over the options in ``argv``; ``argv[0]`` is ignored.

    With ``permute`` true, non-option arguments are moved behind the options.
    Once iteration stops, ``self.argv[self.ind:]`` are the non-option arguments.
    An ambiguous long option is reported as ``'?'`` without consuming it.
    """

    def __init__(self, argv: Sequence[str], optstring: str,
                 longopts: Optional[Sequence[LongOption]] = None,
                 permute: bool = True) -> None:
        self.argv: List[str] = list(argv)
        self.optstring = optstring
        self.longopts = list(longopts) if longopts else []
        self.permute = permute
        self.ind = 1
        self.position = 1
        self._pos = 0
        self._n_args = 0

    def __iter__(self) -> "OptionScanner":
        return self

    def _move_left(self, j: int, n: int) -> None:
        item = self.argv.pop(j)
        self.argv.insert(j - n, item)

    @staticmethod
    def _is_option(text: str) -> bool:
        return text.startswith("-") and text != "-"

    def __next__(self) -> ParsedOption:
        argv = self.argv
        argc = len(argv)
        if self.permute:
            while self.position < argc and not self._is_option(argv[self.position]):
                self.position += 1
                self._n_args += 1
        arg: Optional[str] = None
        longidx = -1
        i0 = self.position
        if self.position >= argc or not self._is_option(argv[self.position]):
            self.ind = self.position - self._n_args
            raise StopIteration
        current = argv[self.position]
        if current.startswith("--"):
            if current == "--":
                self._move_left(self.position, self._n_args) if self._n_args else None
                self.position += 1
                self.ind = self.position - self._n_args
                raise StopIteration
            opt: Hashable = "?"
            self._pos = -1
            if self.longopts:
                name, sep, value = current[2:].partition("=")
                exact = [k for k, lo in enumerate(self.longopts)
                         if lo.name.startswith(name) and len(lo.name) == len(name)]
                partial = [k for k, lo in enumerate(self.longopts)
                           if lo.name.startswith(name) and len(lo.name) != len(name)]
                if len(exact) > 1 or (not exact and len(partial) > 1):
                    return ParsedOption("?", None, -1)
                chosen = exact[0] if len(exact) == 1 else partial[0] if len(partial) == 1 else None
                if chosen is not None:
                    lo = self.longopts[chosen]
                    opt, longidx = lo.val, chosen
                    if sep:
                        arg = value
                    if lo.has_arg == ArgKind.REQUIRED and not sep:
                        if self.position < argc - 1:
                            self.position += 1
                            arg = argv[self.position]
                        else:
                            opt = ":"
        else:
            if self._pos == 0:
                self._pos = 1
            ch = current[self._pos]
            self._pos += 1
            opt = ch
            where = self.optstring.find(ch)
            if where < 0:
                opt = "?"
            elif self.optstring[where + 1:where + 2] == ":":
                if self._pos >= len(current):
                    if self.position < argc - 1:
                        self.position += 1
                        arg = argv[self.position]
                    else:
                        opt = ":"
                else:
                    arg = current[self._pos:]
                self._pos = -1
        if self._pos < 0 or self._pos >= len(argv[self.position]):
            self.position += 1
            self._pos = 0
            if self._n_args > 0:
                for j in range(i0, self.position):
                    self._move_left(j, self._n_args)
        self.ind = self.position - self._n_args
        return ParsedOption(opt, arg, longidx)