"""Exceptions raised while parsing PDB entries.

Missing record kinds and impossible chain alignments abort the parse.
Malformed scalar columns never raise (see ``respdb.utils.to_int``) and lookups
that find nothing return ``None`` or an empty list.
"""


class PDBParseError(ValueError):
    """Base class for every failure that aborts a parse."""


class RecordsNotFoundError(PDBParseError):
    """A required record kind (or metadata tag) is absent from the source."""

    def __init__(self, record, message=None):
        self.record = record
        super().__init__(message or "{} records not found".format(record))


class AlignmentError(PDBParseError):
    """The SEQRES sequence of a chain is too short to place its ATOM residues."""

    def __init__(self, chain, seqres_length, span):
        self.chain = chain
        self.seqres_length = seqres_length
        self.span = span
        super().__init__(
            "chain {}: SEQRES length {} cannot hold an ATOM span of {}".format(
                chain, seqres_length, span))
