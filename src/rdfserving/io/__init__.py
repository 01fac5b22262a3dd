"""Input record codecs."""

from rdfserving.io.delimited import decode, decode_record, encode

__all__ = ["decode", "decode_record", "encode"]
