"""
Field tokenizer for flatrec.

Splits one raw line into an ordered list of ``RawField`` tokens according
to three settings:

- ``delimiter``: one or more characters, matched as an exact substring
  (``"###"`` splits on the three-character sequence, not on ``#``).
- ``qualifier``: optional single character used to quote a field so that
  it may contain the delimiter (e.g. ``'a,b'``).
- ``trim_whitespace``: strip leading/trailing whitespace of every token.
  Trimming happens *before* the qualifier is stripped, so whitespace
  inside the qualifiers is preserved.

Qualification is all-or-nothing per line: when a qualifier is configured,
a line must either qualify every field or none of them. Mixed lines such
as ``'a',b,'c'`` raise ``QuotingError``, as do fields that open a
qualifier without closing it (or close one they never opened).

Token count and order are always preserved. A trailing delimiter yields a
trailing empty field rather than being dropped: ``"a,b,"`` has three
tokens.
"""

from __future__ import annotations

from dataclasses import dataclass

from flatrec.exceptions import ConfigurationError, QuotingError
from flatrec.records import RawField

DEFAULT_DELIMITER = ","


@dataclass(frozen=True)
class DelimitedTokenizer:
    """Splits delimited lines into ``RawField`` tokens.

    Instances are immutable and hold no per-line state, so one tokenizer
    can be shared by any number of mappers.
    """

    delimiter: str = DEFAULT_DELIMITER
    qualifier: str | None = None
    trim_whitespace: bool = False

    def __post_init__(self) -> None:
        if not self.delimiter:
            raise ConfigurationError("Delimiter must not be empty")
        if self.qualifier is not None:
            if len(self.qualifier) != 1:
                raise ConfigurationError(
                    f"Qualifier must be a single character, got {self.qualifier!r}"
                )
            if self.qualifier in self.delimiter:
                raise ConfigurationError(
                    f"Qualifier {self.qualifier!r} must not be part of "
                    f"the delimiter {self.delimiter!r}"
                )

    def tokenize(self, line: str) -> list[RawField]:
        """Split *line* into raw fields.

        Raises:
            QuotingError: If qualifier usage in the line is inconsistent.
        """
        if self.qualifier is None:
            tokens = line.split(self.delimiter)
            if self.trim_whitespace:
                tokens = [t.strip() for t in tokens]
            return [RawField(index=i, raw_content=t) for i, t in enumerate(tokens)]

        pieces = self._split_qualified(line)
        flags = [qualified for _, qualified in pieces]
        if any(flags) and not all(flags):
            unqualified = [i for i, qualified in enumerate(flags) if not qualified]
            raise QuotingError(
                f"Line mixes qualified and unqualified fields; all fields must be "
                f"qualified with {self.qualifier!r} (unqualified: {unqualified})",
                line,
            )
        return [RawField(index=i, raw_content=text) for i, (text, _) in enumerate(pieces)]

    # ------------------------------------------------------------------
    # Qualified scanning
    # ------------------------------------------------------------------

    def _skip_blanks(self, line: str, pos: int) -> int:
        """Advance over whitespace that is not the start of a delimiter."""
        n = len(line)
        while pos < n and line[pos].isspace() and not line.startswith(self.delimiter, pos):
            pos += 1
        return pos

    def _find_closing(self, line: str, start: int) -> tuple[int, int] | None:
        """Find the qualifier that closes a field opened before *start*.

        A closing qualifier is one followed, after optional whitespace, by
        the delimiter or the end of the line. Returns ``(close, after)``
        where *after* is the position of that delimiter (or ``len(line)``).
        """
        q = self.qualifier
        j = line.find(q, start)
        while j != -1:
            after = self._skip_blanks(line, j + 1)
            if after == len(line) or line.startswith(self.delimiter, after):
                return j, after
            j = line.find(q, j + 1)
        return None

    def _split_qualified(self, line: str) -> list[tuple[str, bool]]:
        """Scan *line* left to right into ``(content, is_qualified)`` pairs."""
        q = self.qualifier
        d = self.delimiter
        n = len(line)
        pieces: list[tuple[str, bool]] = []
        pos = 0

        while True:
            lead = self._skip_blanks(line, pos)
            if lead < n and line[lead] == q:
                found = self._find_closing(line, lead + 1)
                if found is None:
                    raise QuotingError(
                        f"Field {len(pieces)} opens qualifier {q!r} but never closes it",
                        line,
                    )
                close, after = found
                pieces.append((line[lead + 1:close], True))
                end = after
            else:
                end = line.find(d, pos)
                if end == -1:
                    end = n
                token = line[pos:end]
                if token.strip().endswith(q):
                    raise QuotingError(
                        f"Field {len(pieces)} closes qualifier {q!r} it never opened",
                        line,
                    )
                pieces.append((token.strip() if self.trim_whitespace else token, False))

            if end >= n:
                return pieces
            pos = end + len(d)


def tokenize(
    line: str,
    delimiter: str = DEFAULT_DELIMITER,
    qualifier: str | None = None,
    trim_whitespace: bool = False,
) -> list[RawField]:
    """Convenience wrapper around ``DelimitedTokenizer.tokenize()``."""
    tokenizer = DelimitedTokenizer(
        delimiter=delimiter, qualifier=qualifier, trim_whitespace=trim_whitespace
    )
    return tokenizer.tokenize(line)
