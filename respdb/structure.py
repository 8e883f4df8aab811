"""PDB entries and the parse pipeline

Description:
    Defines the Structure aggregate that owns every atom and residue of a PDB
    entry together with the index maps over them, and the parser that builds it:

        ATOM/HETATM scan -> residue chains -> SEQRES scan -> chain alignment
        -> UniProt positions -> sites

    CIF metadata has no dependency on the atom pipeline and can be parsed in a
    worker thread while the pipeline runs. A Structure is only returned once
    every stage has completed; any stage failure propagates to the caller.

Usage:
    from respdb.structure import parse_structure
    structure = parse_structure(raw_pdb, raw_cif, sifts)
    structure.residue("B", 1)
    structure.uniprot_residues("P01308", 30)

Requirements:
    - Python 3.x
    - NumPy

Author: DY
Date: 2025-02-27
"""

from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor

from respdb.cif import parse_cif
from respdb.mapping import align_chains, resolve_uniprot_positions
from respdb.pdbtools import AtomList, build_chains, het_groups, scan_atoms, scan_seqres
from respdb.sites import extract_site_descriptions, extract_sites, merge_sites
from respdb.utils import logger, timeit


class Structure:
    """A parsed PDB entry.

    Collaborators read from a Structure but never modify it. The lookup methods
    return None or an empty list when nothing is found.
    """
    def __init__(self, raw_pdb=b"", raw_cif=b""):
        self.raw_pdb = raw_pdb
        self.raw_cif = raw_cif

        self.title = ""
        self.method = ""
        self.resolution = 0.0
        self.date = None
        self.total_length = 0

        self.atoms = AtomList()
        self.hetatoms = AtomList()
        self.het_groups = []

        self.sifts = None
        self.seqres_offsets = {}      # chain -> SEQRES offset
        self.chain_start = {}         # chain -> first ATOM residue number
        self.chain_end = {}           # chain -> last ATOM residue number
        self.seqres = {}              # chain -> [Residue] from SEQRES
        self.seqres_chains = {}       # chain -> {SEQRES position: Residue}
        self.chains = {}              # chain -> {ATOM residue number: Residue}
        self.uniprot_positions = {}   # accession -> {UniProt position: [Residue]}

        self.binding_site = {}        # site name -> [Residue]
        self.binding_site_desc = {}   # site name -> description
        self.sites = {}               # site name -> Site

    @classmethod
    def from_raw_atoms(cls, raw_pdb):
        """Build a Structure from ATOM and HETATM records only.

        Useful for PDB files written by external tools, which lack SEQRES,
        metadata and sites.
        """
        structure = cls(raw_pdb=raw_pdb)
        structure.extract_residues()
        return structure

    # Pipeline stages

    def extract_residues(self):
        """Scan ATOM and HETATM records and build the residue chains."""
        self.atoms = scan_atoms(self.raw_pdb, "ATOM")
        self.hetatoms = scan_atoms(self.raw_pdb, "HETATM", required=False)
        self.het_groups = het_groups(self.hetatoms)
        self.chains = build_chains(self.atoms)
        self.total_length = sum(len(chain) for chain in self.chains.values())
        logger.debug("Built %d residue(s) in %d chain(s)", self.total_length, len(self.chains))

    def extract_seqres(self):
        self.seqres = scan_seqres(self.raw_pdb)

    def make_mappings(self, sifts=None):
        """Align chains to SEQRES and, if given SIFTS mappings, resolve UniProt positions."""
        alignment = align_chains(self.chains, self.seqres)
        self.seqres_offsets = alignment.offsets
        self.chain_start = alignment.start
        self.chain_end = alignment.end
        self.seqres_chains = alignment.seqres_chains
        self.sifts = sifts
        if sifts is not None:
            self.uniprot_positions = resolve_uniprot_positions(
                self.seqres_chains, sifts.uniprot_mappings())

    def extract_sites(self):
        self.binding_site = extract_sites(self.raw_pdb, self.chains)
        self.binding_site_desc = extract_site_descriptions(self.raw_pdb)
        self.sites = merge_sites(self.binding_site, self.binding_site_desc)

    def set_metadata(self, metadata):
        self.title = metadata.title
        self.method = metadata.method
        self.resolution = metadata.resolution
        self.date = metadata.date

    # Queries

    def residue(self, chain, struct_position):
        """Residue at an ATOM residue number, or None."""
        return self.chains.get(chain, {}).get(struct_position)

    def seqres_residue(self, chain, position):
        """Observed residue at a SEQRES position, or None."""
        return self.seqres_chains.get(chain, {}).get(position)

    def uniprot_residues(self, accession, position):
        """Residues of every chain mapped to a UniProt position."""
        return list(self.uniprot_positions.get(accession, {}).get(position, []))

    def site_residues(self, name):
        return list(self.binding_site.get(name, []))

    def chain_ids(self):
        return sorted(self.chains)

    def residues(self):
        """Iterate over residues sorted by chain and residue number."""
        for chid in self.chain_ids():
            chain = self.chains[chid]
            for pos in sorted(chain):
                yield chain[pos]

    def ca_atoms(self, chain=None):
        """Alpha-carbon ATOM records, optionally restricted to one chain."""
        atoms = self.atoms.mask("CA", mode="name")
        if chain is not None:
            atoms = atoms.mask(chain, mode="chid")
        return atoms

    def seqres_sequence(self, chain):
        """One-letter SEQRES sequence of a chain."""
        return "".join(res.name1 for res in self.seqres.get(chain, []))

    def to_dict(self):
        return {
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "method": self.method,
            "resolution": self.resolution,
            "totalLength": self.total_length,
            "hetGroups": list(self.het_groups),
            "seqResOffsets": dict(self.seqres_offsets),
            "chainStartResNumber": dict(self.chain_start),
            "chainEndResNumber": dict(self.chain_end),
            "bindingSite": {
                name: [res.to_dict() for res in residues]
                for name, residues in self.binding_site.items()
            },
            "bindingSiteDesc": dict(self.binding_site_desc),
        }

    def __iter__(self):
        return self.residues()

    def __repr__(self):
        return "<Structure {!r} with {} chain(s), {} residue(s)>".format(
            self.title, len(self.chains), self.total_length)


class PDBParser:
    """Parses raw PDB and CIF contents into a Structure.

    Parameters:
        raw_pdb (bytes or str): PDB file contents.
        raw_cif (bytes or str): mmCIF file contents.
        sifts (SIFTS, optional): UniProt range mappings of the entry.
        concurrent (bool): Parse CIF metadata in a worker thread.
        parse_metadata (bool): Read title, method, resolution and date from
            the CIF contents. When False the CIF contents are ignored and the
            metadata attributes keep their empty defaults.
    """
    def __init__(self, raw_pdb, raw_cif=b"", sifts=None, concurrent=False, parse_metadata=True):
        self.raw_pdb = raw_pdb
        self.raw_cif = raw_cif
        self.sifts = sifts
        self.concurrent = concurrent
        self.parse_metadata = parse_metadata

    def _build(self, structure):
        structure.extract_residues()
        structure.extract_seqres()
        structure.make_mappings(self.sifts)
        structure.extract_sites()

    @timeit
    def parse(self):
        structure = Structure(self.raw_pdb, self.raw_cif)
        if not self.parse_metadata:
            self._build(structure)
            logger.info("Parsed %r without metadata", structure)
            return structure
        if self.concurrent:
            with ThreadPoolExecutor(max_workers=1) as executor:
                future = executor.submit(parse_cif, self.raw_cif)
                self._build(structure)
                metadata = future.result()
        else:
            self._build(structure)
            metadata = parse_cif(self.raw_cif)
        structure.set_metadata(metadata)
        logger.info("Parsed %r", structure)
        return structure


def parse_structure(raw_pdb, raw_cif=b"", sifts=None, concurrent=False, parse_metadata=True):
    """Parse a PDB entry. See PDBParser."""
    return PDBParser(raw_pdb, raw_cif, sifts=sifts, concurrent=concurrent,
                     parse_metadata=parse_metadata).parse()


def _parse_job(job):
    return parse_structure(*job)


def parse_many(jobs, max_workers=None):
    """Parse independent entries in parallel processes.

    Parameters:
        jobs (iterable): Tuples of (raw_pdb, raw_cif) or (raw_pdb, raw_cif, sifts).
        max_workers (int, optional): Number of worker processes.

    Returns:
        list: Structures in the order of ``jobs``. The first failure is raised.
    """
    jobs = list(jobs)
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_parse_job, jobs))
