"""File: io.py

Description:
    This module provides I/O utilities for respdb: reading PDB, mmCIF and SIFTS
    files from disk into parsed objects, locating entry files in a directory, and
    exporting per-residue data as a pandas DataFrame or CSV file.

Usage Example:
    >>> from respdb.io import pdb2structure, save_residues
    >>> structure = pdb2structure("1mso.pdb", "1mso.cif", sifts_path="1mso.json")
    >>> save_residues(structure, "1mso_residues.csv")

Requirements:
    - Python 3.x
    - Pandas
    - pathlib
    - respdb utilities (timeit, logger)
    - respdb structure (Structure, parse_structure)

Author: DY
Date: YYYY-MM-DD
"""

from pathlib import Path
import pandas as pd
from respdb.utils import timeit, logger
from respdb.sifts import SIFTS
from respdb.structure import Structure, parse_structure, parse_many

RESIDUE_COLUMNS = [
    "chain", "structPosition", "position", "name1",
    "unp_id", "unp_position", "mean_bfactor", "norm_mean_bfactor",
]

################################################################################
## Reading Entries
################################################################################

def read_raw(fpath):
    """Return the contents of a file as bytes.

    Parameters
    ----------
    fpath : str or Path
        Path to the file.

    Returns
    -------
    bytes
    """
    return Path(fpath).read_bytes()


def read_sifts(fpath, pdb_id=None):
    """Read a SIFTS mappings JSON file.

    Parameters
    ----------
    fpath : str or Path
        Path to the JSON document saved from the SIFTS API.
    pdb_id : str, optional
        Entry to read. Defaults to the file stem.

    Returns
    -------
    SIFTS
    """
    fpath = Path(fpath)
    return SIFTS.from_json(read_raw(fpath), pdb_id=pdb_id or fpath.stem)


@timeit
def pdb2structure(pdb_path, cif_path=None, sifts_path=None, atoms_only=False, concurrent=False,
                  parse_metadata=True):
    """Parse PDB entry files into a Structure.

    Parameters
    ----------
    pdb_path : str or Path
        PDB format file.
    cif_path : str or Path, optional
        mmCIF file of the same entry. Defaults to ``pdb_path`` with a .cif suffix.
    sifts_path : str or Path, optional
        SIFTS mappings JSON. UniProt positions are only resolved when given.
    atoms_only : bool, optional
        Only read ATOM and HETATM records (default is False).
    concurrent : bool, optional
        Parse the CIF metadata in a worker thread (default is False).
    parse_metadata : bool, optional
        Read the CIF metadata (default is True). When False no CIF file is read.

    Returns
    -------
    Structure
    """
    pdb_path = Path(pdb_path)
    logger.info("Reading %s", pdb_path)
    raw_pdb = read_raw(pdb_path)
    if atoms_only:
        return Structure.from_raw_atoms(raw_pdb)
    raw_cif = b""
    if parse_metadata:
        cif_path = Path(cif_path) if cif_path else pdb_path.with_suffix(".cif")
        raw_cif = read_raw(cif_path)
    sifts = read_sifts(sifts_path, pdb_id=pdb_path.stem) if sifts_path else None
    return parse_structure(raw_pdb, raw_cif, sifts=sifts, concurrent=concurrent,
                           parse_metadata=parse_metadata)


def pull_files(directory, pattern):
    r"""Recursively search for files in a directory matching a given pattern.

    Parameters
    ----------
    directory : str or Path
        The root directory to search.
    pattern : str
        The glob pattern to match files (e.g., \*.pdb).

    Returns
    -------
    list[Path]
        Sorted paths that match the pattern.

    Raises
    ------
    FileNotFoundError
        If the specified directory does not exist or is not a directory.
    """
    base_path = Path(directory)
    if not base_path.exists() or not base_path.is_dir():
        raise FileNotFoundError(
            f"Directory '{directory}' does not exist or is not a directory."
        )
    return sorted(base_path.rglob(pattern))


def dir2structures(directory, max_workers=None):
    """Parse every entry of a directory in parallel.

    Each ``<id>.pdb`` needs an ``<id>.cif`` next to it; an ``<id>.json`` SIFTS
    document is used when present.

    Parameters
    ----------
    directory : str or Path
        Directory holding the entry files.
    max_workers : int, optional
        Number of worker processes.

    Returns
    -------
    dict
        Entry id (file stem) to Structure.
    """
    pdb_paths = pull_files(directory, "*.pdb")
    jobs = []
    for pdb_path in pdb_paths:
        sifts_path = pdb_path.with_suffix(".json")
        sifts = read_sifts(sifts_path, pdb_id=pdb_path.stem) if sifts_path.exists() else None
        jobs.append((read_raw(pdb_path), read_raw(pdb_path.with_suffix(".cif")), sifts))
    structures = parse_many(jobs, max_workers=max_workers)
    return {path.stem: structure for path, structure in zip(pdb_paths, structures)}


################################################################################
## Residue Tables
################################################################################

def residues_to_dataframe(structure):
    """Tabulate the residues of a Structure, one row per residue.

    Parameters
    ----------
    structure : Structure

    Returns
    -------
    pd.DataFrame
        Columns as in ``RESIDUE_COLUMNS`` plus ``n_atoms``, sorted by chain and
        residue number.
    """
    rows = []
    for residue in structure.residues():
        row = residue.to_dict()
        row["n_atoms"] = len(residue.atoms)
        rows.append(row)
    return pd.DataFrame(rows, columns=RESIDUE_COLUMNS + ["n_atoms"])


def save_residues(structure, fpath="residues.csv", sep=","):
    """Save the residue table of a Structure as CSV.

    Parameters
    ----------
    structure : Structure
    fpath : str, optional
        Output path (default is 'residues.csv').
    sep : str, optional
        Field separator (default is a comma).

    Returns
    -------
    None
    """
    df = residues_to_dataframe(structure)
    df.to_csv(fpath, index=False, sep=sep)
    logger.info("Saved %d residues to %s", len(df), fpath)
