"""Metadata from the mmCIF file of a PDB entry

Description:
    Reads the four scalar fields the rest of the package reports: title,
    experimental method, high resolution limit and initial deposition date.
    The file is tokenized by Biopython's MMCIF2Dict; values are then looked up
    by their data item tag. Looped categories (e.g. several _refine rows of a
    joint X-ray/neutron entry) report their first row.

Usage:
    from respdb.cif import parse_cif
    metadata = parse_cif(raw_cif)
    metadata.title, metadata.resolution

Author: DY
"""

from datetime import datetime
from io import StringIO

from Bio.PDB.MMCIF2Dict import MMCIF2Dict

from respdb.errors import PDBParseError, RecordsNotFoundError
from respdb.utils import logger, to_text

TITLE_TAG = "_struct.title"
METHOD_TAG = "_refine.pdbx_refine_id"
RESOLUTION_TAG = "_refine.ls_d_res_high"
DATE_TAG = "_pdbx_database_status.recvd_initial_deposition_date"

MISSING_VALUES = ("", "?", ".")


class CIFMetadata:
    """Scalar metadata of an entry."""
    def __init__(self, title, method, resolution, date):
        self.title = title
        self.method = method
        self.resolution = resolution
        self.date = date

    def __repr__(self):
        return "<CIFMetadata {!r} {} {} A {}>".format(
            self.title, self.method, self.resolution, self.date)


def read_cif_dict(raw_cif):
    """Tokenize CIF contents into a {tag: [values]} mapping.

    Raises:
        PDBParseError: If the text is not well-formed CIF.
    """
    try:
        return MMCIF2Dict(StringIO(to_text(raw_cif)))
    except ValueError as e:
        raise PDBParseError("malformed CIF: {}".format(e)) from e


def extract_cif_value(name, tag, mmcif):
    """Return the value of a data item, or raise RecordsNotFoundError.

    Parameters:
        name (str): Field name used in the error message.
        tag (str): Full data item tag, e.g. "_struct.title".
        mmcif (dict): Mapping returned by read_cif_dict.
    """
    values = mmcif.get(tag)
    if isinstance(values, list):
        value = values[0] if values else ""
    else:
        value = values or ""
    # semicolon text fields keep their line breaks
    value = " ".join(value.split())
    if value in MISSING_VALUES:
        raise RecordsNotFoundError(name, "CIF {} not found".format(name))
    return value


def extract_cif_resolution(mmcif):
    value = extract_cif_value("resolution", RESOLUTION_TAG, mmcif)
    try:
        return float(value)
    except ValueError as e:
        raise RecordsNotFoundError(
            "resolution", "CIF resolution {!r} is not a number".format(value)) from e


def extract_cif_date(mmcif):
    """Initial deposition date as a datetime.date."""
    value = extract_cif_value("date", DATE_TAG, mmcif)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise RecordsNotFoundError("date", "parse CIF date {!r}".format(value)) from e


def parse_cif(raw_cif):
    """Extract title, method, resolution and deposition date.

    Every field is required.

    Raises:
        RecordsNotFoundError: If any field is missing or cannot be decoded.
        PDBParseError: If the CIF text cannot be tokenized.
    """
    mmcif = read_cif_dict(raw_cif)
    metadata = CIFMetadata(
        title=extract_cif_value("title", TITLE_TAG, mmcif),
        method=extract_cif_value("method", METHOD_TAG, mmcif),
        resolution=extract_cif_resolution(mmcif),
        date=extract_cif_date(mmcif),
    )
    logger.debug("Parsed CIF metadata %r", metadata)
    return metadata
