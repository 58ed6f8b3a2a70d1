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

from argparse import ArgumentTypeError
import os

from prephylo.process.base import print_col, RED, YELLOW


def prephylo_arg_check(arg):

    if not arg.infile and not arg.generate_cfg:
        print_col("No input file specified. Provide one or more alignment "
                  "files as arguments.", RED)

    if arg.generate_cfg:
        return 0

    if arg.unalign and (arg.fill or arg.fillends or arg.ambiguity or
                        arg.fillgaps is not None):
        print_col("The ambiguity code (-N) and gap filling (-fill, -fillends,"
                  " -fillgaps) options are ignored when removing gaps "
                  "(-unalign)", YELLOW, quiet=arg.quiet)

    if arg.numerize and arg.translate:
        print_col("Ignoring translation dictionary (-translate) when "
                  "numerizing taxon names (-numerize)", YELLOW,
                  quiet=arg.quiet)

    if arg.numerize and arg.sort:
        print_col("Numerized alignments are not sorted (-sort)", YELLOW,
                  quiet=arg.quiet)

    if arg.codon and arg.seq_type == "protein":
        print_col("The codon option (-codon) can only be performed on "
                  "nucleotide alignments.", RED)

    if arg.conc and arg.overwrite:
        print_col("Ignoring overwrite option (-overwrite) when concatenating "
                  "alignments (-conc)", YELLOW, quiet=arg.quiet)

    if arg.conc and arg.output_format != "fasta":
        print_col("Ignoring output format option (-output) when "
                  "concatenating alignments (-conc)", YELLOW,
                  quiet=arg.quiet)

    if arg.summary and not arg.conc:
        print_col("The summary table (--summary) is only written when "
                  "concatenating alignments (-conc)", YELLOW, quiet=arg.quiet)

    for opt, fpath in [("filter list", arg.filter),
                       ("translation dictionary", arg.translate),
                       ("partition file", arg.partition),
                       ("Gblocks program", arg.gblocks)]:
        if fpath and not os.path.isfile(fpath):
            print_col("The %s %s does not exist." % (opt, fpath), RED)

    return 0


def gap_cutoff(value):
    """
    Checks the type of the gap filling cutoff. Assures that the value is a
    positive integer
    :param value: (string) The value provided with the -fillgaps option
    :return:
    """

    try:
        value = int(value)
    except ValueError:
        raise ArgumentTypeError("The value '{}' is not an "
                                "integer.".format(value))

    if value < 1:
        raise ArgumentTypeError("The value '{}' must be a positive "
                                "integer.".format(value))

    return value


def check_infile_list(infiles):

    dirs = []
    lost = []
    good_files = []

    for fpath in infiles:

        if not os.path.exists(fpath):
            lost.append(fpath)

        elif os.path.isdir(fpath):
            dirs.append(fpath)

        else:
            good_files.append(fpath)

    return good_files, dirs, lost


__author__ = "Diogo N. Silva"
