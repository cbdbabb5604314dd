"""
Field name resolution for flatrec.

Field names come from one of two places:

1. An explicit list given in the mapper configuration. This always wins.
2. A header line ("convention over configuration"): the header is split
   with the same tokenizer as the data lines and its tokens are used as
   field names verbatim (after the tokenizer's own trim policy).

Once names are known, ``resolve_field_specs()`` fixes which token
positions feed which target properties. Without explicit indices the
mapping is positional (token *i* -> name *i*); with indices, only the
referenced positions are mapped and every other token is ignored.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from flatrec.exceptions import ConfigurationError
from flatrec.records import FieldSpec
from flatrec.tokenizer import DelimitedTokenizer


def _check_names(names: Sequence[str], source: str) -> tuple[str, ...]:
    """Reject blank and duplicate field names."""
    blank = [i for i, name in enumerate(names) if not name or not name.strip()]
    if blank:
        raise ConfigurationError(f"Blank field name(s) at position(s) {blank} in {source}")
    duplicates = sorted(name for name, count in Counter(names).items() if count > 1)
    if duplicates:
        raise ConfigurationError(f"Duplicate field name(s) in {source}: {duplicates}")
    return tuple(names)


def resolve_field_names(
    explicit_names: Sequence[str] | None,
    header_line: str | None,
    tokenizer: DelimitedTokenizer,
) -> tuple[str, ...]:
    """Determine the ordered field names.

    Args:
        explicit_names: Names from configuration; takes precedence.
        header_line: A header line to tokenize when no explicit names
            are configured.
        tokenizer: The tokenizer used for data lines.

    Returns:
        Tuple of field names.

    Raises:
        ConfigurationError: If neither source is available, or the names
            are blank or duplicated.
        QuotingError: If the header line itself is badly qualified.
    """
    if explicit_names:
        return _check_names(explicit_names, "configured field names")
    if header_line is None:
        raise ConfigurationError(
            "No field names configured and no header line has been read"
        )
    names = [f.raw_content for f in tokenizer.tokenize(header_line)]
    return _check_names(names, f"header line {header_line!r}")


def resolve_field_specs(
    field_names: Sequence[str],
    field_indices: Sequence[int] | None = None,
    names_are_explicit: bool = True,
) -> tuple[FieldSpec, ...]:
    """Build the ordered token-position -> property-name mapping.

    Args:
        field_names: Resolved field names (explicit or from the header).
        field_indices: Optional subset of token positions to map.
        names_are_explicit: ``True`` when *field_names* came from
            configuration. With a subset, explicit names pair with the
            indices one-to-one; header names are looked up by index.

    Raises:
        ConfigurationError: If indices are negative, duplicated, or
            inconsistent with the names.
    """
    if field_indices is None:
        return tuple(FieldSpec(index=i, name=name) for i, name in enumerate(field_names))

    indices = list(field_indices)
    if not indices:
        raise ConfigurationError("Field index subset must not be empty")
    negative = [i for i in indices if i < 0]
    if negative:
        raise ConfigurationError(f"Field indices must not be negative: {negative}")
    if len(set(indices)) != len(indices):
        raise ConfigurationError(f"Field indices must be unique: {indices}")

    if names_are_explicit:
        if len(indices) != len(field_names):
            raise ConfigurationError(
                f"{len(indices)} field indices configured for "
                f"{len(field_names)} field names; counts must match"
            )
        return tuple(FieldSpec(index=i, name=name) for i, name in zip(indices, field_names))

    out_of_range = [i for i in indices if i >= len(field_names)]
    if out_of_range:
        raise ConfigurationError(
            f"Field indices {out_of_range} are outside the header "
            f"({len(field_names)} fields)"
        )
    return tuple(FieldSpec(index=i, name=field_names[i]) for i in indices)
