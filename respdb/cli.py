"""Command line interface

Description:
    Parses a PDB entry from disk and prints a short summary, or writes its
    residue table as CSV.

    respdb 1mso.pdb --cif 1mso.cif --sifts 1mso.json --out residues.csv
    respdb model.pdb --atoms-only
    respdb 1mso.pdb --no-metadata

Author: DY
"""

import argparse
import sys

from respdb.errors import PDBParseError
from respdb.io import pdb2structure, save_residues
from respdb.utils import logger


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Parse a PDB entry and map its residues to SEQRES and UniProt positions."
    )
    parser.add_argument("pdb", help="PDB format file.")
    parser.add_argument("--cif", help="mmCIF file of the entry (default: PDB path with .cif).")
    parser.add_argument("--sifts", help="SIFTS mappings JSON file of the entry.")
    parser.add_argument("-o", "--out", help="Write the residue table to this CSV file.")
    parser.add_argument("--atoms-only", action="store_true",
                        help="Only read ATOM/HETATM records.")
    parser.add_argument("--concurrent", action="store_true",
                        help="Parse CIF metadata in a worker thread.")
    parser.add_argument("--no-metadata", dest="parse_metadata", action="store_false",
                        help="Skip the CIF metadata; no CIF file is read.")
    return parser.parse_args(argv)


def summary(structure):
    lines = []
    if structure.title:
        lines.append("{} ({}, {} A, {})".format(
            structure.title, structure.method, structure.resolution, structure.date))
    for chid in structure.chain_ids():
        line = "chain {}: {} residues, ATOM {}..{}".format(
            chid, len(structure.chains[chid]),
            min(structure.chains[chid]), max(structure.chains[chid]))
        if chid in structure.seqres_offsets:
            line += ", SEQRES offset {}".format(structure.seqres_offsets[chid])
        lines.append(line)
    for accession, positions in structure.uniprot_positions.items():
        lines.append("UniProt {}: {} positions mapped".format(accession, len(positions)))
    for site in structure.sites.values():
        lines.append("site {}: {} residues {}".format(
            site.name, len(site.residues), site.description).rstrip())
    return "\n".join(lines)


def main(argv=None):
    args = parse_arguments(argv)
    try:
        structure = pdb2structure(args.pdb, cif_path=args.cif, sifts_path=args.sifts,
                                  atoms_only=args.atoms_only, concurrent=args.concurrent,
                                  parse_metadata=args.parse_metadata)
    except (PDBParseError, OSError) as e:
        logger.error("%s: %s", args.pdb, e)
        return 1
    if args.out:
        save_residues(structure, args.out)
    else:
        print(summary(structure))
    return 0


if __name__ == "__main__":
    sys.exit(main())
