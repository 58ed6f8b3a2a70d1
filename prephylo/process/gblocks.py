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
Wrapper of the Gblocks program, which removes poorly aligned positions
from an alignment. The alignment is written to a temporary FASTA file,
Gblocks is executed on it and its output, which breaks the sequences in
blocks of ten characters, is read back into the `Alignment`.
"""

import os
import subprocess
from os.path import join, exists

from prephylo.process.sequence import parse_fasta, OutputFormat
from prephylo.process.error_handling import GblocksError, \
    ConfigurationError

# Sequence type flags of Gblocks
gblocks_types = {"dna": "d", "codon": "c", "protein": "p"}

# Extension of the Gblocks output file
gblocks_ext = ".gb"


def gblocks_command(gblocks_bin, input_file, ntaxa, seq_type="dna"):
    """Builds the Gblocks command line.

    The minimum number of sequences for a flank position (-b2) is set
    to half the number of taxa plus one. The other block parameters are
    fixed: maximum of 3 contiguous non-conserved positions (-b3), minimum
    block length of 6 (-b4) and all gap positions allowed (-b5).

    Parameters
    ----------
    gblocks_bin : str
        Path to the Gblocks executable.
    input_file : str
        Path to the FASTA input file.
    ntaxa : int
        Number of taxa in the alignment.
    seq_type : str
        One of "dna", "codon" or "protein".

    Returns
    -------
    cmd : list
    """

    return [gblocks_bin,
            input_file,
            "-t=%s" % gblocks_types[seq_type],
            "-b2=%s" % (ntaxa // 2 + 1),
            "-b3=3",
            "-b4=6",
            "-b5=a",
            "-e=%s" % gblocks_ext]


def run_gblocks(aln, gblocks_bin, seq_type="dna", temp_dir=".prephylo-temp"):
    """Runs Gblocks on an `Alignment` and replaces its sequences with the
    conserved blocks.

    Parameters
    ----------
    aln : Alignment
        Alignment object. Its `records` attribute is replaced in place.
    gblocks_bin : str
        Path to the Gblocks executable.
    seq_type : str
        One of "dna", "codon" or "protein".
    temp_dir : str
        Directory where the Gblocks input and output files are stored.

    Raises
    ------
    ConfigurationError
        When the Gblocks executable does not exist.
    GblocksError
        When Gblocks does not produce its output file.
    """

    if not os.path.isfile(gblocks_bin):
        raise ConfigurationError("Gblocks program %s does not exist." %
                                 gblocks_bin)

    if not exists(temp_dir):
        os.makedirs(temp_dir)

    input_file = join(temp_dir, "%s.fasta" % aln.sname)
    output_file = input_file + gblocks_ext

    aln.write_to_file(OutputFormat.FASTA, input_file)

    # Gblocks returns a non zero status even on successful runs, so only
    # the output file is checked
    with open(os.devnull, "w") as devnull:
        subprocess.Popen(gblocks_command(gblocks_bin, input_file, len(aln),
                                         seq_type),
                         stdout=devnull, stderr=devnull).wait()

    if not exists(output_file):
        raise GblocksError("Gblocks did not produce an output file for %s" %
                           aln.name)

    with open(output_file) as fh:
        aln.records = parse_fasta(fh)

    os.remove(input_file)
    os.remove(output_file)


__author__ = "Diogo N. Silva"
