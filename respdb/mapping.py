"""Residue position mappings

Description:
    Reconciles the three numbering schemes of a PDB entry. ATOM residue numbers
    are aligned to SEQRES indices with a per-chain integer offset, and UniProt
    positions are projected onto the aligned residues through SIFTS range
    mappings.

Usage:
    from respdb.mapping import align_chains, resolve_uniprot_positions
    alignment = align_chains(chains, seqres)
    positions = resolve_uniprot_positions(alignment.seqres_chains, sifts.uniprot_mappings())

Requirements:
    - NumPy

Author: DY
"""

import numpy as np

from respdb.errors import AlignmentError
from respdb.utils import logger


class ChainAlignment:
    """Result of aligning every ATOM chain to its SEQRES sequence."""
    def __init__(self):
        self.offsets = {}        # chain -> SEQRES offset
        self.start = {}          # chain -> first ATOM residue number
        self.end = {}            # chain -> last ATOM residue number
        self.seqres_chains = {}  # chain -> {SEQRES position: Residue}

    def __repr__(self):
        return "<ChainAlignment offsets {}>".format(self.offsets)


def chain_bounds(residues):
    """Return (min, max) residue numbers of a {number: Residue} chain map."""
    positions = list(residues)
    return min(positions), max(positions)


def offset_scores(residues, sequence, min_pos, max_pos):
    """Score every candidate offset of a chain against its SEQRES sequence.

    The score of an offset is the number of ATOM residues whose one-letter code
    equals the SEQRES residue at index ``position + offset - min_pos``.

    Parameters:
        residues (dict): {residue number: Residue} for one chain.
        sequence (list): SEQRES residues of the chain.
        min_pos, max_pos (int): Residue number bounds of the chain.

    Returns:
        np.ndarray: Score of each offset in ``[0, len(sequence) - (max_pos - min_pos))``.
    """
    steps = len(sequence) - (max_pos - min_pos)
    if steps <= 0:
        return np.zeros(0, dtype=int)
    numbers = sorted(residues)
    indices = np.array(numbers, dtype=int) - min_pos
    observed = np.array([residues[n].name1 for n in numbers])
    expected = np.array([res.name1 for res in sequence])
    return np.array(
        [np.count_nonzero(expected[indices + offset] == observed) for offset in range(steps)],
        dtype=int,
    )


def best_offset(scores):
    """Offset with the highest score. Ties go to the lowest offset."""
    # np.argmax returns the first occurrence of the maximum
    return int(np.argmax(scores))


def align_chains(chains, seqres):
    """Align the ATOM numbering of every chain to its SEQRES sequence.

    Each residue gets ``position = struct_position - min_pos + offset + 1``.

    Parameters:
        chains (dict): Chain -> {residue number: Residue} from ATOM records.
        seqres (dict): Chain -> list of SEQRES Residue.

    Returns:
        ChainAlignment

    Raises:
        AlignmentError: If a chain's SEQRES sequence is not longer than its ATOM span.
    """
    alignment = ChainAlignment()
    for chain, residues in chains.items():
        min_pos, max_pos = chain_bounds(residues)
        sequence = seqres.get(chain, [])
        span = max_pos - min_pos
        if len(sequence) - span <= 0:
            raise AlignmentError(chain, len(sequence), span)
        scores = offset_scores(residues, sequence, min_pos, max_pos)
        offset = best_offset(scores)
        logger.debug("Chain %s: offset %d matches %d/%d residues",
                     chain, offset, scores[offset], len(residues))

        alignment.start[chain] = min_pos
        alignment.end[chain] = max_pos
        alignment.offsets[chain] = offset
        aligned = {}
        for residue in residues.values():
            residue.position = residue.struct_position - min_pos + offset + 1
            aligned[residue.position] = residue
        alignment.seqres_chains[chain] = aligned
    return alignment


def resolve_uniprot_positions(seqres_chains, mappings):
    """Project UniProt positions onto aligned structure residues.

    Every UniProt position ``i`` of a range maps to the SEQRES position
    ``i - unp_start + pdb_start`` of the range's chain. Residues found there are
    appended to the position's list and get ``unp_id``/``unp_position`` set.
    When several ranges reach the same residue, the last one processed sets
    these fields; the lists keep every contributor.

    Parameters:
        seqres_chains (dict): Chain -> {SEQRES position: Residue}.
        mappings (dict): Accession -> ordered list of sifts.Mapping.

    Returns:
        dict: Accession -> {UniProt position: [Residue, ...]}.
    """
    positions = {}
    for accession, ranges in mappings.items():
        resolved = positions.setdefault(accession, {})
        for mapping in ranges:
            chain = seqres_chains.get(mapping.chain_id, {})
            for i in range(mapping.unp_start, mapping.unp_end + 1):
                residue = chain.get(i - mapping.unp_start + mapping.pdb_start)
                if residue is None:
                    continue
                resolved.setdefault(i, []).append(residue)
                residue.unp_id = accession
                residue.unp_position = i
        logger.debug("UniProt %s: %d positions resolved", accession, len(resolved))
    return positions
