"""Amino acid names and codes

Description:
    Classifies residue tokens found in PDB records. Any full name (case-insensitive),
    three-letter or one-letter code of the 20 standard amino acids resolves to the
    triple (full name, three-letter code, one-letter code). Anything else resolves
    to (input, "Unk", "X") so callers can test ``name1 == "X"``.

Usage:
    from respdb.aminoacids import aminoacid_names, is_aminoacid
    aminoacid_names("TRP")    # ('Tryptophan', 'Trp', 'W')
    aminoacid_names("HOH")    # ('HOH', 'Unk', 'X')

Author: DY
"""

AMINOACIDS = (
    ("Alanine", "Ala", "A"),
    ("Arginine", "Arg", "R"),
    ("Asparagine", "Asn", "N"),
    ("Aspartic acid", "Asp", "D"),
    ("Cysteine", "Cys", "C"),
    ("Glutamic acid", "Glu", "E"),
    ("Glutamine", "Gln", "Q"),
    ("Glycine", "Gly", "G"),
    ("Histidine", "His", "H"),
    ("Isoleucine", "Ile", "I"),
    ("Leucine", "Leu", "L"),
    ("Lysine", "Lys", "K"),
    ("Methionine", "Met", "M"),
    ("Phenylalanine", "Phe", "F"),
    ("Proline", "Pro", "P"),
    ("Serine", "Ser", "S"),
    ("Threonine", "Thr", "T"),
    ("Tryptophan", "Trp", "W"),
    ("Tyrosine", "Tyr", "Y"),
    ("Valine", "Val", "V"),
)

UNKNOWN_NAME3 = "Unk"
UNKNOWN_NAME1 = "X"

# Every accepted spelling, lowercased, to its table entry
_LOOKUP = {}
for _entry in AMINOACIDS:
    for _name in _entry:
        _LOOKUP[_name.lower()] = _entry
del _entry, _name


def aminoacid_names(token):
    """Return (full name, 3-letter, 1-letter) for a residue token.

    Parameters:
        token (str): Full name, three-letter or one-letter code, any case.

    Returns:
        tuple: The canonical triple, or (token, "Unk", "X") if unrecognized.
    """
    token = token.strip()
    entry = _LOOKUP.get(token.lower())
    if entry is None:
        return token, UNKNOWN_NAME3, UNKNOWN_NAME1
    return entry


def is_aminoacid(letter):
    """True if ``letter`` is the one-letter code of a standard amino acid."""
    return any(entry[2] == letter for entry in AMINOACIDS)
