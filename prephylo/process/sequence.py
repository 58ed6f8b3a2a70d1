#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
#  Copyright 2012 Unknown <diogo@arch>
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; either version 2 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with this program; if not, write to the Free Software
#  Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston,
#  MA 02110-1301, USA.

"""
The `sequence` module contains the two main classes of PrePhylo,
`Alignment` and `Concatenator`.

`Alignment` holds the data of a single FASTA alignment file as a list of
(taxon, sequence) records and provides the editing operations applied to each
input file (trimming of empty columns, filling of gaps, normalization of
ambiguity codes, renaming of taxa), the splitting of the alignment by codon
position or by partition and the writers of the per-file output formats.

`Concatenator` receives the edited `Alignment` objects one at a time, in
the order of the input files, and merges them into a single supermatrix
while keeping a registry of the partitions of each gene. The supermatrix
can then be written in one of the `ConcatenationScheme` layouts.
"""

from prephylo.process.base import Base, ambiguity_codes, empty_chars
from prephylo.process.data import Partitions, PartitionException
from prephylo.process.error_handling import MalformedInput, \
    AlignmentUnequalLength, DuplicateTaxa, EmptyAlignment, \
    ConfigurationError

import os
from os.path import basename, splitext, join, exists
from collections import OrderedDict
from itertools import compress
from io import StringIO
from enum import Enum

import numpy as np
import pandas as pd


class OutputFormat(Enum):
    """Output formats of single alignments."""

    FASTA = "fasta"
    NEXUS = "nexus"
    PHYLIP = "phylip"
    PIR = "pir"


class ConcatenationScheme(Enum):
    """Layouts of the concatenated supermatrix.

    NONE writes a plain FASTA supermatrix, RAXML a Phylip supermatrix with a
    RAxML partition file, BEAST and MRBAYES a Nexus file with the partition
    information in an assumptions or mrbayes block, respectively.
    """

    NONE = "none"
    RAXML = "raxml"
    BEAST = "beast"
    MRBAYES = "mrbayes"


format_ext = {OutputFormat.FASTA: ".fasta",
              OutputFormat.NEXUS: ".nex",
              OutputFormat.PHYLIP: ".phy",
              OutputFormat.PIR: ".pir"}


def parse_fasta(handle, taxa_filter=None):
    """Parses FASTA records from an iterable of lines.

    The taxon name is the first word of the header line. Sequence lines
    are stripped of any whitespace and converted to upper case. Empty lines
    and lines starting with "#" are ignored.

    Parameters
    ----------
    handle : file object or iterable of str
        Source of the FASTA lines.
    taxa_filter : set, optional
        When provided, only the records whose name is in this set are kept.
        The sequence lines of the remaining records are discarded.

    Returns
    -------
    records : list
        List of (taxon, sequence) tuples, in the order they were read.
        Repeated taxon names are kept as separate records.

    Raises
    ------
    MalformedInput
        When sequence data appears before the first header.
    """

    records = []
    taxon = None
    keep = False

    for line in handle:
        line = line.strip()

        if not line or line.startswith("#"):
            continue

        if line.startswith(">"):
            fields = line[1:].split()
            taxon = fields[0] if fields else ""
            keep = taxa_filter is None or taxon in taxa_filter

            if keep:
                records.append((taxon, []))

        elif taxon is None:
            raise MalformedInput("Sequence data found before the first "
                                 "header: %s" % line)

        elif keep:
            records[-1][1].append("".join(line.split()).upper())

    return [(tx, "".join(seq)) for tx, seq in records]


def terminal_gap_runs(sequence):
    """Returns the length of the leading and trailing runs of gaps.

    When the sequence is made only of gaps, the whole sequence is counted
    as the leading run and the trailing run is 0.

    Parameters
    ----------
    sequence : str

    Returns
    -------
    lead : int
        Length of the leading run of "-".
    trail : int
        Length of the trailing run of "-".
    """

    size = len(sequence)

    lead = 0
    while lead < size and sequence[lead] == "-":
        lead += 1

    trail = 0
    while trail < size - lead and sequence[size - trail - 1] == "-":
        trail += 1

    return lead, trail


def internal_gap_run(sequence, cutoff):
    """Finds the longest internal run of gaps with at least `cutoff` length.

    Internal runs are those delimited by a non gap character on both
    sides, that is, leading and trailing runs are never reported. When
    several runs share the largest length, the first one is returned.

    Parameters
    ----------
    sequence : str
    cutoff : int
        Minimum length of the run.

    Returns
    -------
    run : tuple or None
        (start, length) of the run, or None if there is no qualifying run.
    """

    best = None
    size = len(sequence)
    i = 0

    while i < size:
        if sequence[i] != "-":
            i += 1
            continue

        start = i
        while i < size and sequence[i] == "-":
            i += 1

        length = i - start

        if start > 0 and i < size and length >= cutoff:
            if best is None or length > best[1]:
                best = (start, length)

    return best


def phylip_name(taxon):
    """Pads or truncates a taxon name to the 10 characters of strict
    Phylip."""

    return taxon[:10].ljust(10)


class Alignment(Base):
    """Main interface for single alignment files.

    The `Alignment` class is the data structure of a single FASTA
    alignment. The sequence data is stored in the `records` attribute, a
    list of (taxon, sequence) tuples in the order they appear in the file.
    Taxon names may be repeated in the input file, and `numerize` can be
    used to give them unique names. The editing methods change the
    alignment in place, while the split methods return new `Alignment`
    objects.

    Parameters
    ----------
    input_alignment : str, optional
        Path to the FASTA alignment file. If not provided, an empty
        alignment is created (see `from_string`).
    taxa_filter : set, optional
        Only the taxa in this set are read from the alignment file.

    Attributes
    ----------
    records : list
        List of (taxon, sequence) tuples.
    path : str
        Full path to the alignment file.
    name : str
        Name of the alignment file.
    sname : str
        Name of the alignment file without extension. This is also the name
        of the partition of this alignment in the concatenation.
    numerized : bool
        Whether the taxon names were replaced by numerical names.
    """

    def __init__(self, input_alignment=None, taxa_filter=None):

        self.records = []
        self.numerized = False

        self.path = input_alignment
        if input_alignment:
            self.name = basename(input_alignment)
            self.sname = basename(splitext(input_alignment)[0])
            self.read_alignment(taxa_filter)
        else:
            self.name = None
            self.sname = None

    @classmethod
    def from_string(cls, text, taxa_filter=None, name="alignment"):
        """Creates an `Alignment` from a string in FASTA format.

        Parameters
        ----------
        text : str
            FASTA formatted alignment.
        taxa_filter : set, optional
            Only the taxa in this set are retained.
        name : str
            Name given to the alignment (used as its partition name).

        Returns
        -------
        aln : Alignment
        """

        aln = cls()
        aln.name = aln.sname = name
        aln.records = parse_fasta(text.splitlines(), taxa_filter)

        return aln

    @classmethod
    def from_sequences(cls, sequences, name):

        aln = cls()
        aln.name = aln.sname = name
        aln.records = list(sequences)

        return aln

    def __iter__(self):
        """Iterates over the (taxon, sequence) records of the alignment."""

        return iter(self.records)

    def __len__(self):
        return len(self.records)

    @property
    def alignment(self):
        """Maps the taxon names to their sequences.

        Returns
        -------
        alignment : OrderedDict

        Raises
        ------
        DuplicateTaxa
            When the alignment has repeated taxon names.
        """

        self.check_unique_taxa()

        return OrderedDict(self.records)

    @property
    def taxa_names(self):
        return [taxon for taxon, _ in self.records]

    @property
    def locus_length(self):
        """Length of the alignment, given by its first sequence."""

        for _, seq in self.records:
            return len(seq)

        return 0

    def read_alignment(self, taxa_filter=None):
        """Reads the FASTA file in `path` into the `records` attribute.

        Raises
        ------
        ConfigurationError
            When the alignment file does not exist.
        """

        if not os.path.isfile(self.path):
            raise ConfigurationError("Input file %s does not exist." %
                                     self.path)

        with open(self.path) as fh:
            self.records = parse_fasta(fh, taxa_filter)

    def check_sizes(self):
        """Checks whether all sequences have the same length.

        Raises
        ------
        AlignmentUnequalLength
            When one or more sequences differ in length.
        """

        lengths = set(len(seq) for _, seq in self.records)

        if len(lengths) > 1:
            raise AlignmentUnequalLength(
                "Sequences in %s have unequal length" % self.name)

    def check_unique_taxa(self):
        """Checks whether every taxon name occurs only once.

        Raises
        ------
        DuplicateTaxa
            When one or more taxon names are repeated.
        """

        duplicates = self.duplicate_taxa(self.taxa_names)

        if duplicates:
            raise DuplicateTaxa("Alignment %s has duplicated taxon names: %s."
                                " Use the -numerize option to rename them" %
                                (self.name, ", ".join(duplicates)))

    def _map_sequences(self, func):

        self.records = [(taxon, func(seq)) for taxon, seq in self.records]

    # =========================================================================
    # Editing methods
    # =========================================================================

    def trim_empty_columns(self):
        """Removes the columns made only of gaps and missing data.

        A column is empty if every sequence has a "-", "N" or "?" in it.
        Positions beyond the end of shorter sequences count as gaps. The
        empty columns are first marked in a boolean mask over all columns
        and then filtered from each sequence.

        Returns
        -------
        removed : int
            Number of removed columns.
        """

        if not self.records:
            return 0

        max_len = max(len(seq) for _, seq in self.records)
        empty = np.ones(max_len, dtype=bool)

        for _, seq in self.records:
            if seq:
                empty[:len(seq)] &= np.isin(list(seq), empty_chars)

        keep = ~empty

        self._map_sequences(lambda seq: "".join(compress(seq,
                                                         keep[:len(seq)])))

        return int(empty.sum())

    def unalign(self):
        """Removes all gaps from the sequences."""

        self._map_sequences(lambda seq: seq.replace("-", ""))

    def normalize_ambiguity(self):
        """Replaces the IUPAC ambiguity codes by N."""

        table = str.maketrans("".join(ambiguity_codes),
                              "N" * len(ambiguity_codes))

        self._map_sequences(lambda seq: seq.translate(table))

    @staticmethod
    def _fill_ends(seq):

        lead, trail = terminal_gap_runs(seq)

        return "N" * lead + seq[lead:len(seq) - trail] + "N" * trail

    def fill_ends(self):
        """Replaces the leading and trailing gaps of each sequence by N."""

        self._map_sequences(self._fill_ends)

    @staticmethod
    def _fill_gaps(seq, cutoff):

        while True:
            run = internal_gap_run(seq, cutoff)
            if run is None:
                return seq
            start, length = run
            seq = seq[:start] + "N" * length + seq[start + length:]

    def fill_gaps(self, cutoff=10):
        """Replaces internal runs of gaps by N.

        Internal runs with at least `cutoff` gaps are replaced, longest
        first, until no such run is left in the sequence.

        Parameters
        ----------
        cutoff : int
            Minimum length of the gap runs that are replaced.
        """

        self._map_sequences(lambda seq: self._fill_gaps(seq, cutoff))

    def _rename_taxa(self, new_names):

        self.records = [(new, seq) for new, (_, seq) in
                        zip(new_names, self.records)]

    def truncate_names(self, size=10):
        """Keeps only the first `size` characters of the taxon names.

        Truncated names may become repeated, in which case `numerize`
        should follow.
        """

        self._rename_taxa([x[:size] for x in self.taxa_names])

    def numerize(self):
        """Replaces the taxon names by taxon1, taxon2, ... in read order.

        Every record receives a new name, including records with repeated
        names.

        Returns
        -------
        name_map : OrderedDict
            Maps the new names to the original names.
        """

        name_map = OrderedDict(("taxon%s" % (i + 1), taxon) for i, taxon in
                               enumerate(self.taxa_names))

        self._rename_taxa(list(name_map))
        self.numerized = True

        return name_map

    def translate(self, name_map):
        """Renames the taxa present in `name_map`.

        Taxa that are not in `name_map` keep their name, and names in
        `name_map` that are absent from the alignment are ignored.

        Parameters
        ----------
        name_map : dict
            Maps original names to their replacement.
        """

        self._rename_taxa([name_map.get(x, x) for x in self.taxa_names])

    def sort_taxa(self):
        """Sorts the sequences by taxon name.

        Numerized alignments keep their original order. Records with the
        same name keep their relative order.
        """

        if self.numerized:
            return

        self.records = sorted(self.records, key=lambda x: x[0])

    def apply_edits(self, trim=False, unalign=False, ambiguity=False,
                    fill_ends=False, fill_gaps=None, truncate=False,
                    numerize=False, name_map=None, sort=False):
        """Applies the requested editing operations in a fixed order.

        The order is: (1) trimming of empty columns; (2) removal of gaps or,
        alternatively, normalization of ambiguity codes, filling of the
        terminal gaps and filling of the internal gaps; (3) truncation of
        taxon names followed by numerization or translation; (4) sorting.

        Parameters
        ----------
        trim : bool
        unalign : bool
            If True, the ambiguity and fill operations are not applied.
        ambiguity : bool
        fill_ends : bool
        fill_gaps : int, optional
            Cutoff of the internal gap filling. Gap filling is disabled if
            None.
        truncate : bool
            Keep only the first 10 characters of the taxon names.
        numerize : bool
            If True, `name_map` is ignored.
        name_map : dict, optional
        sort : bool

        Returns
        -------
        numerized_names : OrderedDict or None
            The name map returned by `numerize`, if it was applied.
        """

        numerized_names = None

        if trim:
            self.trim_empty_columns()

        if unalign:
            self.unalign()
        else:
            if ambiguity:
                self.normalize_ambiguity()
            if fill_ends:
                self.fill_ends()
            if fill_gaps is not None:
                self.fill_gaps(fill_gaps)

        if truncate:
            self.truncate_names()

        if numerize:
            numerized_names = self.numerize()
        elif name_map:
            self.translate(name_map)

        if sort:
            self.sort_taxa()

        return numerized_names

    # =========================================================================
    # Split methods
    # =========================================================================

    def split_partitions(self, partitions):
        """Splits the alignment according to a partition table.

        Parameters
        ----------
        partitions : Partitions
            Partition table. The ranges of each partition are visited in
            order and the columns of each range are taken with its stride.

        Returns
        -------
        split_alignments : OrderedDict
            Maps partition names to the new `Alignment` objects.

        Raises
        ------
        PartitionException
            When a partition refers to columns beyond the alignment length.
        """

        self.check_sizes()

        split_alignments = OrderedDict()

        for name in partitions.get_partition_names():
            columns = partitions.get_columns(name)

            if columns and max(columns) >= self.locus_length:
                raise PartitionException(
                    "Partition %s (up to column %s) is out of the bounds of "
                    "alignment %s (%s columns)" % (name, max(columns) + 1,
                                                   self.name,
                                                   self.locus_length))

            split_alignments[name] = self.from_sequences(
                [(taxon, "".join(seq[i] for i in columns))
                 for taxon, seq in self.records], name)

        return split_alignments

    def split_codons(self):
        """Splits the alignment into its three codon positions.

        Returns
        -------
        codon_alignments : list
            Three `Alignment` objects, one for each codon position.
        """

        return [self.from_sequences(
            [(taxon, seq[k::3]) for taxon, seq in self.records],
            "%s.codon%s" % (self.sname, k + 1)) for k in range(3)]

    # =========================================================================
    # Writers
    # =========================================================================

    def _write_fasta(self, fh):

        for taxon, seq in self.records:
            fh.write(">%s\n%s\n" % (taxon, seq))

    def _write_nexus(self, fh):

        fh.write("#NEXUS\nbegin data;\n\tdimensions ntax=%s nchar=%s;\n"
                 "\tformat datatype=dna missing=? gap=-;\nmatrix\n" %
                 (len(self.records), self.locus_length))

        for i, (taxon, seq) in enumerate(self.records):
            fh.write("[%s] %s\t%s\n" % (i + 1, taxon, seq.replace("N", "?")))

        fh.write(";\nend;\n")

    def _write_phylip(self, fh):

        fh.write(" %s %s\n" % (len(self.records), self.locus_length))

        for taxon, seq in self.records:
            fh.write("%s   %s\n" % (phylip_name(taxon), seq))

    def _write_pir(self, fh):

        for taxon, seq in self.records:
            fh.write(">DL; %s\n%s.\n%s*\n" % (taxon, taxon, seq))

    def _get_writer(self, output_format):

        write_methods = {OutputFormat.FASTA: self._write_fasta,
                         OutputFormat.NEXUS: self._write_nexus,
                         OutputFormat.PHYLIP: self._write_phylip,
                         OutputFormat.PIR: self._write_pir}

        return write_methods[OutputFormat(output_format)]

    def write_to_file(self, output_format, output_file):
        """Writes the alignment into a file.

        Parameters
        ----------
        output_format : OutputFormat or str
            Format of the output file ("fasta", "nexus", "phylip" or "pir").
        output_file : str
            Path to the output file.
        """

        writer = self._get_writer(output_format)

        with open(output_file, "w") as fh:
            writer(fh)

    def to_string(self, output_format):
        """Returns the alignment as a string in `output_format`."""

        fh = StringIO()
        self._get_writer(output_format)(fh)

        return fh.getvalue()


class Concatenator(Base):
    """Merges single gene alignments into a supermatrix.

    Alignments are added one at a time with `add_alignment`, in the order
    of the input files. Each alignment with sequence data is registered as
    a new partition named after the alignment file. Taxa that are missing
    from an alignment receive a filler block with the length of that
    partition, and taxa that first appear in a later alignment are
    back-filled for all previous partitions, so that every sequence of the
    supermatrix always has the length of all partitions combined.

    Parameters
    ----------
    fill_ends : bool
        If True, missing data is filled with "N". Otherwise, with "-".

    Attributes
    ----------
    alignment : OrderedDict
        The supermatrix. Maps taxon names to the concatenated sequences.
    partitions : Partitions
        Registry of the concatenated partitions.
    missing : str
        Filler character for missing taxa.
    """

    def __init__(self, fill_ends=False):

        self.alignment = OrderedDict()
        self.partitions = Partitions()
        self.missing = "N" if fill_ends else "-"

        self.partition_taxa = OrderedDict()
        """
        Number of taxa of the alignment of each partition
        """

    def __len__(self):
        return len(self.alignment)

    @property
    def locus_length(self):
        """Length of the supermatrix."""

        return self.partitions.counter

    @property
    def taxa_names(self):
        return list(self.alignment)

    def add_alignment(self, aln):
        """Adds an `Alignment` to the supermatrix.

        Parameters
        ----------
        aln : Alignment

        Raises
        ------
        AlignmentUnequalLength
            When the sequences of `aln` have unequal length.
        DuplicatePartition
            When a partition with the name of `aln` already exists.
        DuplicateTaxa
            When `aln` has repeated taxon names.
        """

        aln.check_sizes()
        aln.check_unique_taxa()

        previous_length = self.locus_length
        length = aln.locus_length

        if length:
            self.partitions.add_partition(aln.sname, length=length)
            self.partition_taxa[aln.sname] = len(aln)

        for taxon, seq in aln:
            # New taxa are back-filled for the previous partitions
            if taxon not in self.alignment:
                self.alignment[taxon] = self.missing * previous_length

            self.alignment[taxon] += seq

        aln_taxa = set(aln.taxa_names)
        for taxon in self.alignment:
            if taxon not in aln_taxa:
                self.alignment[taxon] += self.missing * length

    def iter_sorted(self, nexus=False):
        """Iterates over the supermatrix sorted by taxon name.

        Parameters
        ----------
        nexus : bool
            If True, "N" characters are converted to "?".
        """

        for taxon in sorted(self.alignment):
            seq = self.alignment[taxon]
            yield taxon, seq.replace("N", "?") if nexus else seq

    def _write_none(self, output_dir):

        output_file = join(output_dir, "output.fasta")

        with open(output_file, "w") as fh:
            for taxon, seq in self.iter_sorted():
                fh.write(">%s\n%s\n" % (taxon, seq))

        return [output_file]

    def _write_raxml(self, output_dir):

        output_file = join(output_dir, "output.phy")

        with open(output_file, "w") as fh:
            fh.write(" %s %s\n" % (len(self.alignment), self.locus_length))
            for taxon, seq in self.iter_sorted():
                fh.write("%s   %s\n" % (phylip_name(taxon), seq))

        output_files = [output_file]

        if not self.partitions.is_single():
            partition_file = join(output_dir, "output_partitions.txt")
            self.partitions.write_to_file("raxml", partition_file)
            output_files.append(partition_file)

        return output_files

    def _write_nexus_matrix(self, fh):

        for taxon, seq in self.iter_sorted(nexus=True):
            fh.write("\t%s\t%s\n" % (taxon, seq))

        fh.write(";\nend;\n\n")

    def _write_beast(self, output_dir):

        output_file = join(output_dir, "output.nex")

        with open(output_file, "w") as fh:
            fh.write("#NEXUS\nbegin taxa;\n\tdimensions ntax=%s;\n"
                     "\ttaxlabels\n" % len(self.alignment))
            for taxon in sorted(self.alignment):
                fh.write("\t%s\n" % taxon)
            fh.write(";\nend;\n\n")

            fh.write("begin characters;\n\tdimensions nchar=%s;\n"
                     "\tformat datatype=dna missing=? gap=-;\n\tmatrix\n" %
                     self.locus_length)
            self._write_nexus_matrix(fh)

            fh.write("begin assumptions;\n")
            self.partitions._write_nexus(fh)
            fh.write("end;\n")

        return [output_file]

    def _write_mrbayes(self, output_dir):

        output_file = join(output_dir, "output.nex")

        with open(output_file, "w") as fh:
            fh.write("#NEXUS\nbegin data;\n\tdimensions ntax=%s nchar=%s;\n"
                     "\tformat datatype=dna missing=? gap=-;\n\tmatrix\n" %
                     (len(self.alignment), self.locus_length))
            self._write_nexus_matrix(fh)

            fh.write("begin mrbayes;\n")
            self.partitions._write_nexus(fh)
            fh.write("\tpartition scheme1=%s: %s;\n" % (
                len(self.partitions),
                ", ".join(self.partitions.get_partition_names())))
            fh.write("\tset partition=scheme1;\n"
                     "\tlset app=(all) nst=mixed rates=invgamma;\n"
                     "\tunlink revmat=(all) pinvar=(all) shape=(all) "
                     "statefreq=(all);\n"
                     "\tprset ratepr=variable;\n"
                     "end;\n")

        return [output_file]

    def write_to_file(self, scheme, output_dir="."):
        """Writes the supermatrix according to a concatenation scheme.

        Parameters
        ----------
        scheme : ConcatenationScheme or str
            One of "none", "raxml", "beast" or "mrbayes".
        output_dir : str
            Directory where the output files are written.

        Returns
        -------
        output_files : list
            Paths of the written files.

        Raises
        ------
        EmptyAlignment
            When no sequence was added to the supermatrix.
        """

        if not self.alignment:
            raise EmptyAlignment("No sequences were added to the "
                                 "concatenated alignment")

        write_methods = {ConcatenationScheme.NONE: self._write_none,
                         ConcatenationScheme.RAXML: self._write_raxml,
                         ConcatenationScheme.BEAST: self._write_beast,
                         ConcatenationScheme.MRBAYES: self._write_mrbayes}

        if output_dir and not exists(output_dir):
            os.makedirs(output_dir)

        return write_methods[ConcatenationScheme(scheme)](output_dir)

    @property
    def summary_gene_table(self):
        """Summary statistics of each partition of the supermatrix.

        Returns
        -------
        table : pandas.DataFrame
            One row per partition with the columns genes, start, end,
            nsites, taxa, gap and missing. The gap and missing columns
            count the "-" and "N"/"?" characters of the partition across
            the whole supermatrix, filler blocks included.
        """

        data = []

        for name, start, end in self.partitions.iter_ranges():
            block = "".join(seq[start - 1:end] for seq in
                            self.alignment.values())
            data.append([name, start, end, end - start + 1,
                         self.partition_taxa[name], block.count("-"),
                         block.count("N") + block.count("?")])

        return pd.DataFrame(data, columns=["genes", "start", "end", "nsites",
                                           "taxa", "gap", "missing"])

    def write_summary(self, output_file):
        """Writes `summary_gene_table` into a csv file."""

        self.summary_gene_table.to_csv(output_file, index=False)


__author__ = "Diogo N. Silva"
