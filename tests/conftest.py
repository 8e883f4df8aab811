"""
===============================================================================
File: conftest.py
Description:
    Shared fixtures for the respdb tests. Builds a small insulin-like PDB entry
    (PDB text, mmCIF metadata and SIFTS mappings) with exact fixed-column
    records, so every test works from the same known layout:

        chain A: ATOM 1-21, SEQRES = A chain (21 residues), offset 0
        chain B: ATOM 1-30, SEQRES = 24 x TRP + B chain (54 residues), offset 24
        chain C: ATOM 1-21, SEQRES = A chain (21 residues), offset 0
===============================================================================
"""

import json

import pytest

from respdb.aminoacids import AMINOACIDS

INS_A = "GIVEQCCTSICSLYQLENYCN"
INS_B = "FVNQHLCGSHLVEALYLVCGERGFFYTPKT"
ONE_TO_THREE = {entry[2]: entry[1].upper() for entry in AMINOACIDS}


def atom_line(atid, name, resname, chid, resid, x=0.0, y=0.0, z=0.0,
              occupancy=1.0, bfactor=20.0, element="C", record="ATOM"):
    return (
        f"{record:<6}{atid:>5} {name:<4} {resname:>3} {chid:1}{resid:>4}    "
        f"{x:>8.3f}{y:>8.3f}{z:>8.3f}{occupancy:>6.2f}{bfactor:>6.2f}"
        f"          {element:>2}  "
    )


def seqres_lines(chain, sequence, per_line=13):
    residues = [ONE_TO_THREE[aa] for aa in sequence]
    lines = []
    for serial, i in enumerate(range(0, len(residues), per_line), start=1):
        chunk = " ".join(residues[i:i + per_line])
        lines.append(f"SEQRES {serial:>3} {chain} {len(residues):>4}  {chunk}")
    return lines


def site_line(serial, name, blocks):
    """blocks: list of (resname, chain, resid) with at most four entries."""
    text = f"SITE   {serial:>3} {name:>3} {len(blocks):>2} "
    for resname, chain, resid in blocks:
        text += f"{resname:>3} {chain}{resid:>4}  "
    return text


def make_pdb(chains, seqres, hetatms=(), sites=(), remarks=()):
    """Build PDB text.

    Parameters:
        chains (dict): chain -> (first residue number, one-letter sequence)
        seqres (dict): chain -> one-letter SEQRES sequence
    """
    lines = ["HEADER    HORMONE                                 19-SEP-02   1ABC"]
    lines.extend(remarks)
    for chain, sequence in seqres.items():
        lines.extend(seqres_lines(chain, sequence))
    lines.extend(sites)
    atid = 1
    for chain, (start, sequence) in chains.items():
        for i, aa in enumerate(sequence):
            resid = start + i
            for j, name in enumerate(("N", "CA")):
                lines.append(atom_line(atid, name, ONE_TO_THREE[aa], chain, resid,
                                       x=float(resid), y=float(j), z=0.5,
                                       bfactor=10.0 + resid % 7 + 2 * j,
                                       element=name[0]))
                atid += 1
        lines.append(f"TER   {atid:>5}")
        atid += 1
    for i, (resname, chain, resid) in enumerate(hetatms):
        lines.append(atom_line(atid + i, resname[:2], resname, chain, resid,
                               bfactor=30.0, element=resname[:2], record="HETATM"))
    lines.append("END")
    return "\n".join(lines) + "\n"


CIF_TEXT = """data_1ABC
#
_struct.entry_id                  1ABC
_struct.title                     'T6 Human Insulin at 1.0 A Resolution'
_struct.pdbx_descriptor           Insulin
#
_refine.entry_id                                 1ABC
_refine.pdbx_refine_id                           'X-RAY DIFFRACTION'
_refine.ls_d_res_high                            1.00
_refine.ls_d_res_low                             20.0
#
_pdbx_database_status.status_code                     REL
_pdbx_database_status.entry_id                        1ABC
_pdbx_database_status.recvd_initial_deposition_date   2002-09-19
#
"""

SIFTS_DOCUMENT = {
    "1abc": {
        "UniProt": {
            "P01308": {
                "identifier": "INS_HUMAN",
                "name": "INS_HUMAN",
                "mappings": [
                    {"entity_id": 1, "chain_id": "A", "struct_asym_id": "A",
                     "start": {"residue_number": 1}, "end": {"residue_number": 21},
                     "unp_start": 90, "unp_end": 110},
                    {"entity_id": 2, "chain_id": "B", "struct_asym_id": "B",
                     "start": {"residue_number": 25}, "end": {"residue_number": 54},
                     "unp_start": 25, "unp_end": 54},
                    {"entity_id": 1, "chain_id": "C", "struct_asym_id": "C",
                     "start": {"residue_number": 1}, "end": {"residue_number": 21},
                     "unp_start": 90, "unp_end": 110},
                ],
            }
        },
        "Pfam": {
            "PF00049": {
                "identifier": "Insulin",
                "description": "Insulin/IGF/Relaxin family",
                "name": "Insulin",
                "mappings": [
                    {"entity_id": 2, "chain_id": "B", "struct_asym_id": "B",
                     "start": {"residue_number": 25}, "end": {"residue_number": 54}},
                ],
            }
        },
    }
}

SITES = (
    site_line(1, "AC1", [("HIS", "B", 5), ("HIS", "B", 10)]),
    site_line(1, "AC2", [("CYS", "A", 6), ("CYS", "A", 7), ("GLY", "A", 6), ("HIS", "A", 99)]),
)

REMARKS = (
    "REMARK 800",
    "REMARK 800 SITE",
    "REMARK 800 SITE_IDENTIFIER: AC1",
    "REMARK 800 EVIDENCE_CODE: SOFTWARE",
    "REMARK 800 SITE_DESCRIPTION: BINDING SITE FOR RESIDUE ZN B 31",
    "REMARK 800 SITE_IDENTIFIER: AC2",
    "REMARK 800 EVIDENCE_CODE: SOFTWARE",
    "REMARK 800 SITE_DESCRIPTION: DISULFIDE POCKET",
    "REMARK 800 SITE_IDENTIFIER: AC3",
    "REMARK 800 SITE_DESCRIPTION: BINDING SITE FOR RESIDUE CL B 32",
)


@pytest.fixture
def builder():
    """The make_pdb builder, for tests that need a custom entry."""
    return make_pdb


@pytest.fixture
def pdb_text():
    return make_pdb(
        chains={"A": (1, INS_A), "B": (1, INS_B), "C": (1, INS_A)},
        seqres={"A": INS_A, "B": "W" * 24 + INS_B, "C": INS_A},
        hetatms=[("ZN", "B", 31), ("HOH", "B", 40), ("HOH", "B", 41), ("ZN", "D", 31)],
        sites=SITES,
        remarks=REMARKS,
    )


@pytest.fixture
def cif_text():
    return CIF_TEXT


@pytest.fixture
def sifts_json():
    return json.dumps(SIFTS_DOCUMENT)
