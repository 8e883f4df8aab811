# pylint: disable=too-many-instance-attributes, too-many-arguments, missing-function-docstring, invalid-name

"""Classes and functions for scanning PDB records and building residues

Description:
    This module provides the fixed-column record scanner for PDB text and the
    structure builder. It defines classes for representing individual atoms (Atom),
    groups of atoms (AtomList) and residues (Residue), helper functions to extract
    ATOM/HETATM and SEQRES records from raw PDB contents, and the builder that
    groups atoms into chain -> position -> Residue maps and computes per-residue
    B-factor statistics.

    Multi-model files: only the first MODEL is read. Atoms after the first
    ENDMDL record are ignored rather than accumulated across models.

Usage:
    from respdb.pdbtools import scan_atoms, scan_seqres, build_chains
    atoms = scan_atoms(raw_pdb, "ATOM")
    chains = build_chains(atoms)
    seqres = scan_seqres(raw_pdb)

Requirements:
    - Python 3.x
    - NumPy

Author: DY
Date: 2025-02-27
"""

import numpy as np

from respdb.aminoacids import aminoacid_names
from respdb.errors import RecordsNotFoundError
from respdb.utils import logger, to_float, to_int, to_text

PDB_LINE_WIDTH = 80

###################################
## Classes ##
###################################

class Atom:
    """Represents an ATOM or HETATM record from a PDB file.

    Atoms are created once by the scanner and not modified afterwards.
    """
    def __init__(
        self,
        record,
        atid,
        name,
        resname,
        chid,
        resid,
        x,
        y,
        z,
        occupancy,
        bfactor,
        element,
        charge,
    ):
        self.record = record  # "ATOM" or "HETATM"
        self.atid = atid      # Atom serial number
        self.name = name      # Atom name
        self.resname = resname  # Residue name
        self.chid = chid      # Chain identifier
        self.resid = resid    # Residue sequence number
        self.x = x            # x coordinate
        self.y = y            # y coordinate
        self.z = z            # z coordinate
        self.occupancy = occupancy  # Occupancy
        self.bfactor = bfactor      # Temperature factor
        self.element = element      # Element symbol
        self.charge = charge        # Charge on the atom

    @classmethod
    def from_pdb_line(cls, line):
        """Parse a PDB line and return an Atom instance.

        Malformed numeric columns decode to zero instead of raising.
        """
        line = line.rstrip("\r\n").ljust(PDB_LINE_WIDTH)
        record = line[0:6].strip()
        atid = to_int(line[6:11])
        name = line[12:16].strip()
        resname = line[17:20].strip()
        chid = line[21:22]
        resid = to_int(line[22:26])
        x = to_float(line[30:38])
        y = to_float(line[38:46])
        z = to_float(line[46:54])
        occupancy = to_float(line[54:60])
        bfactor = to_float(line[60:66])
        element = line[76:78].strip()
        charge = line[78:80].strip()
        return cls(record, atid, name, resname, chid, resid,
                   x, y, z, occupancy, bfactor, element, charge)

    def __repr__(self):
        return ("<Atom {} {} {} {}{} "
                "({:.3f}, {:.3f}, {:.3f})>").format(
                    self.record, self.atid, self.name,
                    self.resname, f"{self.chid}{self.resid}",
                    self.x, self.y, self.z)


class AtomList(list):
    """A list of Atom objects with attribute selection."""
    key_funcs = {
        "record": lambda atom: atom.record,
        "name": lambda atom: atom.name,
        "resname": lambda atom: atom.resname,
        "chid": lambda atom: atom.chid,
    }

    @property
    def bfactors(self):
        return [atom.bfactor for atom in self]

    def mask(self, mask_vals, mode="name"):
        """Return a new AtomList with atoms matching the given mask."""
        if isinstance(mask_vals, str):
            mask_vals = {mask_vals}
        if mode not in self.key_funcs:
            raise ValueError("Invalid mode '{}'.".format(mode))
        mask_vals = set(mask_vals)
        return AtomList([atom for atom in self if self.key_funcs[mode](atom) in mask_vals])


class Residue:
    """Represents a residue of a chain, either observed in ATOM records or listed in SEQRES.

    ``struct_position`` is the number printed in the source records (the SEQRES
    index for SEQRES residues). ``position`` is the same residue expressed in
    SEQRES numbering and is set once by the chain alignment. ``unp_id`` and
    ``unp_position`` are set only when a UniProt range mapping covers the residue.
    """
    def __init__(self, chain, struct_position, token):
        self.chain = chain
        self.struct_position = struct_position
        self.position = None
        self.unp_id = None
        self.unp_position = None
        self.name, self.name3, self.name1 = aminoacid_names(token)
        self._atoms = AtomList()
        self.mean_bfactor = 0.0
        self.norm_mean_bfactor = 0.0

    def add_atom(self, atom):
        self._atoms.append(atom)

    @property
    def atoms(self):
        return self._atoms

    def calculate_mean_bfactor(self):
        """Set ``mean_bfactor`` to the arithmetic mean of the atom B-factors."""
        if not self._atoms:
            raise ValueError("residue {}{} has no atoms".format(self.chain, self.struct_position))
        self.mean_bfactor = float(np.mean(self._atoms.bfactors))
        return self.mean_bfactor

    def to_dict(self):
        return {
            "chain": self.chain,
            "structPosition": self.struct_position,
            "position": self.position,
            "unp_id": self.unp_id,
            "unp_position": self.unp_position,
            "name1": self.name1,
            "mean_bfactor": self.mean_bfactor,
            "norm_mean_bfactor": self.norm_mean_bfactor,
        }

    def __iter__(self):
        return iter(self._atoms)

    def __repr__(self):
        return "<Residue {} {}{} with {} atom(s)>".format(
            self.name3, self.chain, self.struct_position, len(self._atoms)
        )


###################################
## Record Scanning ##
###################################

def record_lines(text, record):
    """Yield the lines of ``text`` whose record name column equals ``record``."""
    for line in text.splitlines():
        if line[0:6].strip() == record:
            yield line


def scan_atoms(raw_pdb, record="ATOM", required=True):
    """Extract ATOM or HETATM records from raw PDB contents.

    Only the first MODEL of a multi-model file is read: scanning stops at the
    first ENDMDL record, so atoms of later models (e.g. the other conformers of
    an NMR ensemble) are never merged into the residues of the first one.

    Parameters:
        raw_pdb (bytes or str): PDB file contents.
        record (str): "ATOM" or "HETATM".
        required (bool): Raise RecordsNotFoundError if no record is found.

    Returns:
        AtomList: Atoms in file order.
    """
    atoms = AtomList()
    for line in to_text(raw_pdb).splitlines():
        record_type = line[0:6].strip()
        if record_type == "ENDMDL":
            break
        if record_type == record:
            atoms.append(Atom.from_pdb_line(line))
    if not atoms and required:
        raise RecordsNotFoundError(record)
    logger.debug("Scanned %d %s records", len(atoms), record)
    return atoms


def het_groups(hetatoms):
    """Return the distinct HET group names in order of first appearance."""
    groups = []
    last = None
    for atom in hetatoms:
        if atom.resname != last:
            last = atom.resname
            if last not in groups:
                groups.append(last)
    return groups


def scan_seqres(raw_pdb):
    """Extract the SEQRES sequences from raw PDB contents.

    Continuation lines of a chain append to it; residues are indexed from 0
    in order of appearance.

    Returns:
        dict: Chain identifier to list of Residue.
    """
    seqres = {}
    for line in record_lines(to_text(raw_pdb), "SEQRES"):
        line = line.ljust(PDB_LINE_WIDTH)
        chain = line[11:12]
        residues = seqres.setdefault(chain, [])
        for token in line[19:].split():
            residues.append(Residue(chain, len(residues), token))
    if not seqres:
        raise RecordsNotFoundError("SEQRES")
    logger.debug("Scanned SEQRES for %d chain(s)", len(seqres))
    return seqres


###################################
## Structure Building ##
###################################

def build_chains(atoms):
    """Group atoms into residues keyed by chain and residue number.

    Mean B-factors are computed per residue and then normalized as z-scores over
    the whole residue population (population standard deviation).

    Parameters:
        atoms (AtomList): ATOM records in file order.

    Returns:
        dict: Chain identifier to {residue number: Residue}.
    """
    chains = {}
    for atom in atoms:
        chain = chains.setdefault(atom.chid, {})
        residue = chain.get(atom.resid)
        if residue is None:
            residue = Residue(atom.chid, atom.resid, atom.resname)
            chain[atom.resid] = residue
        residue.add_atom(atom)
    residues = [res for chain in chains.values() for res in chain.values()]
    for residue in residues:
        residue.calculate_mean_bfactor()
    normalize_bfactors(residues)
    return chains


def normalize_bfactors(residues):
    """Set ``norm_mean_bfactor`` on every residue as a population z-score.

    A population without spread normalizes to 0.0.
    """
    if not residues:
        return
    means = np.array([res.mean_bfactor for res in residues], dtype=np.float64)
    mean = means.mean()
    std = means.std()
    if std == 0:
        logger.warning("Mean B-factors have zero spread; z-scores set to 0")
        zscores = np.zeros_like(means)
    else:
        zscores = (means - mean) / std
    for residue, zscore in zip(residues, zscores):
        residue.norm_mean_bfactor = float(zscore)
