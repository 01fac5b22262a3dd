"""
Delimited record encoding.

Lines use CSV conventions: fields are separated by a single delimiter
character and may be wrapped in double quotes, with embedded quotes
doubled. ``encode`` and ``decode`` are exact inverses of each other.
"""

import csv
import io

from rdfserving.errors import MalformedRequestError


def decode(line: str, delimiter: str = ",") -> list[str]:
    """
    Split one delimited line into its tokens.

    Args:
        line: A single line of text, without line terminator.
        delimiter: Field separator.

    Returns:
        Tokens in column order. An empty line yields no tokens.
    """
    reader = csv.reader([line], delimiter=delimiter, quotechar='"', strict=True)
    return next(reader, [])


def encode(tokens: list[str], delimiter: str = ",") -> str:
    """Join tokens into one delimited line, quoting where needed."""
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=delimiter,
        quotechar='"',
        quoting=csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    writer.writerow(tokens)
    return buffer.getvalue()[:-1]


def decode_record(
    line: str | None,
    total_columns: int,
    delimiter: str = ",",
) -> list[str]:
    """
    Decode a request line into exactly ``total_columns`` tokens.

    Args:
        line: Raw input line, or None if the request carried no input.
        total_columns: Schema width.
        delimiter: Field separator.

    Returns:
        List of tokens of length ``total_columns``.

    Raises:
        MalformedRequestError: If the line is missing, cannot be parsed,
            or has the wrong number of tokens.
    """
    if line is None:
        raise MalformedRequestError("No input")
    try:
        tokens = decode(line, delimiter)
    except csv.Error as e:
        raise MalformedRequestError(f"Bad input line: {e}") from e
    if len(tokens) != total_columns:
        raise MalformedRequestError(
            f"Wrong column count: expected {total_columns}, got {len(tokens)}"
        )
    return tokens
