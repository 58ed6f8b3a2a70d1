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

import warnings

# Suppress import warnings
with warnings.catch_warnings():
    warnings.simplefilter("ignore")

    import os
    import sys
    import time
    import argparse
    import configparser
    from glob import glob
    from os.path import join, basename, splitext

    from prephylo.process.base import print_col, RED, GREEN, YELLOW, \
        CleanUp, Base
    from prephylo.process import sequence as seqset
    from prephylo.process import data
    from prephylo.process.gblocks import run_gblocks
    from prephylo.base.sanity import prephylo_arg_check, gap_cutoff, \
        check_infile_list
    from progressbar import ProgressBar, Timer, Bar, Percentage, \
        SimpleProgress


# Section of the configuration file with the option defaults
cfg_section = "PrePhylo"

# Options with an optional value, which must be given as -option=value
bare_flags = {"-conc": "none", "-fillgaps": "10"}


def gen_wgt(msg):

    bar_wdg = [
        msg,
        "( ", SimpleProgress(), " ) ",
        Bar(),
        Percentage(),
        " [", Timer(), "] ",
    ]

    return bar_wdg


def generate_cfg_template(output_file="prephylo_template.ini"):

    with open(output_file, "w") as template_fh:
        template_fh.write("""
# Configuration template file for PrePhylo that can be passed using the -cfg
# option. Each option sets the default value of the command line option with
# the same name. Options given in the command line take precedence.
# Remove the comment character of the options you wish to set.

[PrePhylo]
# Sequence type: dna, codon or protein
# seq_type = dna
# Concatenation scheme: none, raxml, beast or mrbayes
# conc = none
# Path to the Gblocks executable
# gblocks = /usr/bin/Gblocks
# Output format of each alignment: fasta, nexus, phylip or pir
# output_format = fasta
# Output directory
# output_dir = prephylo_output
# Editing options (yes/no)
# trim = no
# fillends = no
# fill = no
# unalign = no
# ambiguity = no
# Minimum length of internal gaps replaced by N
# fillgaps = 10
# Taxa names options
# filter = taxa.txt
# translate = dictionary.txt
# numerize = no
# truncate_names = no
# sort = no
# Splitting options
# codon = no
# partition = partitions.txt
# Miscellaneous
# summary = no
# quiet = no
""")

    return output_file


def read_cfg_defaults(config_file, option_actions):
    """Reads the option defaults from the [PrePhylo] section of a
    configuration file.

    Option names are the destination names of the command line options.
    Flags are read as booleans and the remaining values are converted
    with the type of the corresponding option.

    Parameters
    ----------
    config_file : str
        Path to the configuration file.
    option_actions : dict
        Maps the destination of each PrePhylo option to its argparse
        action.

    Returns
    -------
    defaults : dict
        Maps option destinations to their new default values.
    """

    settings = configparser.ConfigParser()

    if not settings.read(config_file):
        print_col("Configuration file %s could not be read." % config_file,
                  RED)

    if not settings.has_section(cfg_section):
        print_col("Configuration file %s has no [%s] section and will be "
                  "ignored." % (config_file, cfg_section), YELLOW)
        return {}

    defaults = {}

    for key, value in settings.items(cfg_section):
        action = option_actions.get(key)

        if action is None or key in ["infile", "config_file", "help"]:
            print_col("Ignoring unknown option '%s' in configuration file" %
                      key, YELLOW)
            continue

        try:
            if action.nargs == 0:
                if settings.getboolean(cfg_section, key):
                    defaults[key] = action.const
            elif action.type:
                defaults[key] = action.type(value)
            else:
                defaults[key] = value
        except (ValueError, argparse.ArgumentTypeError):
            print_col("Invalid value '%s' for option '%s' in configuration "
                      "file" % (value, key), RED)

        if action.choices and defaults.get(key) not in [None] + \
                list(action.choices):
            print_col("Invalid value '%s' for option '%s' in configuration "
                      "file" % (value, key), RED)

    return defaults


def output_path(input_file, suffix, output_dir=None):
    """Returns the path of an output file derived from an input file.

    The extension of `input_file` is replaced by `suffix`. If `output_dir`
    is provided, the output file is placed there instead of the directory
    of the input file.
    """

    stem = splitext(input_file)[0]

    if output_dir:
        return join(output_dir, basename(stem) + suffix)
    else:
        return stem + suffix


def write_name_map(name_map, output_file):

    with open(output_file, "w") as fh:
        for new_name, original in name_map.items():
            fh.write("%s\t%s\n" % (new_name, original))


@CleanUp
def main_parser(arg, alignment_list):
    """ Function with the main operations of PrePhylo """

    print_col("Executing PrePhylo module at %s %s" % (
        time.strftime("%d/%m/%Y"), time.strftime("%I:%M:%S")), GREEN,
              quiet=arg.quiet)

    if arg.generate_cfg:
        print_col("Generating configuration template file", GREEN,
                  quiet=arg.quiet)
        generate_cfg_template()
        return 0

    # Create temp directory
    tmp_dir = main_parser.temp_dir
    if not os.path.exists(tmp_dir):
        os.makedirs(tmp_dir)

    # Defining main variables
    fill_ends = arg.fillends or arg.fill
    fill_gaps = arg.fillgaps
    if fill_gaps is None and arg.fill:
        fill_gaps = 10
    output_format = seqset.OutputFormat(arg.output_format)
    output_dir = arg.output_dir

    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    # Support wildcars as arguments for windows
    fl = []
    if sys.platform in ["win32", "cygwin"]:
        for p in alignment_list:
            fl += glob(p)
        alignment_list = fl

    # Check input files for directories
    alignment_list, dirs, lost = check_infile_list(alignment_list)

    if dirs:
        print_col("Ignoring input files pointing to a directory: {}".format(
            " ".join(dirs)), YELLOW, quiet=arg.quiet)
    if lost:
        print_col("Input files do not exist: {}".format(" ".join(lost)), RED)
    if not alignment_list:
        print_col("No valid input files have been provided. Terminating...",
                  RED)

    # Auxiliary files
    taxa_filter = None
    if arg.filter:
        print_col("Reading filter list", GREEN, quiet=arg.quiet)
        taxa_filter = Base.read_taxa_filter(arg.filter)

    name_map = None
    if arg.translate and not arg.numerize:
        print_col("Reading translation dictionary", GREEN, quiet=arg.quiet)
        name_map = Base.read_name_map(arg.translate)

    partitions = None
    if arg.partition:
        print_col("Reading partition file", GREEN, quiet=arg.quiet)
        partitions = data.Partitions()
        partitions.read_from_file(arg.partition)

    concatenator = None
    if arg.conc:
        concatenator = seqset.Concatenator(fill_ends=fill_ends)

    if not arg.quiet:
        pbar = ProgressBar(max_value=len(alignment_list),
                           widgets=gen_wgt("Processing alignments "))
    else:
        pbar = None

    print_col("Processing %s alignments" % len(alignment_list), GREEN,
              quiet=arg.quiet)

    empty_files = []

    for p, infile in enumerate(alignment_list):

        if pbar:
            pbar.update(p)

        aln = seqset.Alignment(infile, taxa_filter)

        if not len(aln):
            empty_files.append(infile)
            continue

        numerized_names = aln.apply_edits(
            trim=arg.trim, unalign=arg.unalign, ambiguity=arg.ambiguity,
            fill_ends=fill_ends, fill_gaps=fill_gaps,
            truncate=arg.truncate_names, numerize=arg.numerize,
            name_map=name_map, sort=arg.sort)

        if arg.gblocks:
            run_gblocks(aln, arg.gblocks, arg.seq_type, tmp_dir)

        # Partitions out of the alignment bounds, duplicated partition names
        # and duplicated taxa stop the run before any output of this file is
        # written
        split_alignments = None
        if partitions is not None:
            split_alignments = aln.split_partitions(partitions)

        if concatenator is not None:
            concatenator.add_alignment(aln)

        if numerized_names:
            write_name_map(numerized_names,
                           output_path(infile, ".translate.txt", output_dir))

        # Per file outputs
        if concatenator is None:
            if arg.overwrite:
                aln.write_to_file(seqset.OutputFormat.FASTA, infile)
            elif output_format == seqset.OutputFormat.FASTA:
                root, ext = splitext(infile)
                aln.write_to_file(output_format, output_path(
                    infile, ".out" + ext, output_dir))

            if output_format != seqset.OutputFormat.FASTA:
                aln.write_to_file(output_format, output_path(
                    infile, seqset.format_ext[output_format], output_dir))

        if arg.codon:
            sample = "".join(seq for _, seq in aln)
            if aln.guess_code(sample) != "DNA":
                print_col("Skipping codon split of %s, which does not seem "
                          "to be a nucleotide alignment" % infile, YELLOW,
                          quiet=arg.quiet)
            else:
                for k, codon_aln in enumerate(aln.split_codons()):
                    codon_aln.write_to_file(
                        seqset.OutputFormat.FASTA,
                        output_path(infile, ".codon%s.fasta" % (k + 1),
                                    output_dir))

        if split_alignments is not None:
            for name, part_aln in split_alignments.items():
                part_aln.write_to_file(seqset.OutputFormat.FASTA,
                                       join(output_dir or ".",
                                            name + ".fasta"))

    if pbar:
        pbar.finish()

    if empty_files:
        print_col("The following input files have no sequences and were "
                  "skipped: {}".format(" ".join(empty_files)), YELLOW,
                  quiet=arg.quiet)

    if concatenator is not None:
        print_col("Concatenating %s partitions with %s taxa" % (
            len(concatenator.partitions), len(concatenator)), GREEN,
                  quiet=arg.quiet)
        output_files = concatenator.write_to_file(arg.conc,
                                                  output_dir or ".")

        if arg.summary:
            summary_file = join(output_dir or ".", "output_summary.csv")
            concatenator.write_summary(summary_file)
            output_files.append(summary_file)

        print_col("The concatenated alignment has been saved as %s" %
                  ", ".join(output_files), GREEN, quiet=arg.quiet)


def get_args(arg_list=None, unittest=False):

    # The inclusion of the argument definition in main, makes it possible to
    # import this file as a module and not triggering argparse. The
    # alternative of using a if __name__ == "__main__" statement does not
    # work well with the entry_points parameter of setup.py, since they call
    # the main function but do nothing inside said statement.
    parser = argparse.ArgumentParser(
        description="Command line interface for PrePhylo, a pre-processing "
                    "tool of multiple sequence alignments for phylogenetic "
                    "analyses",
        epilog="Examples:\n"
               "  PrePhylo -type=codon -trim -fill -Gblocks=Gblocks coI.fas "
               "coII.fas\n"
               "  PrePhylo -filter=myTaxa.txt -output=nexus -unalign *.fas\n"
               "  PrePhylo -conc=mrbayes *.fas",
        formatter_class=argparse.RawDescriptionHelpFormatter)

    # Maps the destination of each option to its argparse action, so that
    # the configuration file values can be converted like the command line
    option_actions = {}

    def add_option(group, *args, **kwargs):
        action = group.add_argument(*args, **kwargs)
        option_actions[action.dest] = action

    # Main execution
    main_exec = parser.add_argument_group("Main execution")
    add_option(main_exec, "infile", nargs="*", help="Input alignment files "
                          "in Fasta format")
    add_option(main_exec, "-type", dest="seq_type", default="dna",
                          choices=["dna", "codon", "protein"],
                          help="Sequence data type (default is "
                          "'%(default)s')")
    add_option(main_exec, "-filter", dest="filter", help="Only retain "
                          "sequences defined in a taxa list file")
    add_option(main_exec, "-conc", dest="conc", nargs="?", const="none",
                          choices=["none", "raxml", "beast", "mrbayes"],
                          help="Concatenate multiple alignments and generate"
                          " partition table")
    add_option(main_exec, "-Gblocks", dest="gblocks", help="Path to the "
                          "Gblocks program. Performs Gblocks on each "
                          "alignment")
    add_option(main_exec, "-cfg", dest="config_file", help="Name of the "
                          "configuration file with the default values of "
                          "the options")
    add_option(main_exec, "--generate-cfg", dest="generate_cfg",
                          action="store_const", const=True, default=False,
                          help="Generates a configuration template file")

    # Editing options
    editing = parser.add_argument_group("Editing")
    add_option(editing, "-trim", dest="trim", action="store_const",
                        const=True, default=False, help="Remove empty "
                        "sites (columns)")
    add_option(editing, "-fillends", dest="fillends", action="store_const",
                        const=True, default=False, help="Replace initial "
                        "and final gaps with 'N's")
    add_option(editing, "-fillgaps", dest="fillgaps", nargs="?", const=10,
                        type=gap_cutoff, help="Replace in-sequence gaps no "
                        "shorter than the cutoff with 'N's (default "
                        "cutoff is %(const)s)")
    add_option(editing, "-fill", dest="fill", action="store_const",
                        const=True, default=False, help="Fill both ends "
                        "and gaps")
    add_option(editing, "-unalign", dest="unalign", action="store_const",
                        const=True, default=False, help="Remove all gaps "
                        "(make the sequences unaligned)")
    add_option(editing, "-N", dest="ambiguity", action="store_const",
                        const=True, default=False, help="Replace ambiguous "
                        "codes with 'N's")

    # Taxa names
    taxa = parser.add_argument_group("Taxa names")
    add_option(taxa, "-sort", dest="sort", action="store_const", const=True,
                     default=False, help="Sort sequence names in "
                     "alphabetical order")
    add_option(taxa, "-10", dest="truncate_names", action="store_const",
                     const=True, default=False, help="Keep the first 10 "
                     "characters of sequence names")
    add_option(taxa, "-numerize", dest="numerize", action="store_const",
                     const=True, default=False, help="Translate taxon "
                     "names into numbers, to avoid too complicated or "
                     "duplicated names")
    add_option(taxa, "-translate", dest="translate", help="Translate "
                     "taxon names according to a dictionary file")

    # Splitting
    splitting = parser.add_argument_group("Splitting")
    add_option(splitting, "-codon", dest="codon", action="store_const",
                          const=True, default=False, help="Divide dataset "
                          "into three codon positions")
    add_option(splitting, "-partition", dest="partition", help="Split a "
                          "master alignment by partition, using a "
                          "RAxML-style partition file")

    # Output
    output = parser.add_argument_group("Output")
    add_option(output, "-output", dest="output_format", default="fasta",
                       choices=["fasta", "nexus", "phylip", "pir"],
                       help="Output file format (default is "
                       "'%(default)s')")
    add_option(output, "-overwrite", dest="overwrite", action="store_const",
                       const=True, default=False, help="Overwrite original "
                       "files (default is to create new files)")
    add_option(output, "-o", "--output-dir", dest="output_dir",
                       help="Directory of the output files")
    add_option(output, "--summary", dest="summary", action="store_const",
                       const=True, default=False, help="Writes a table with"
                       " summary statistics of each partition of the "
                       "concatenated alignment")

    miscellaneous = parser.add_argument_group("Miscellaneous")
    add_option(miscellaneous, "-quiet", dest="quiet", action="store_const",
                              const=True, default=False, help="Removes all "
                              "terminal output")

    if arg_list is None:
        arg_list = sys.argv[1:]

    # Bare -conc and -fillgaps flags take their default value. Otherwise,
    # the next input file would be consumed as the option value
    arg_list = ["%s=%s" % (x, bare_flags[x]) if x in bare_flags else x
                for x in arg_list]

    # The configuration file only changes the defaults of the parser, so
    # it must be read before the final parsing
    cfg_parser = argparse.ArgumentParser(add_help=False)
    cfg_parser.add_argument("-cfg", dest="config_file")
    cfg_args, _ = cfg_parser.parse_known_args(arg_list)

    if cfg_args.config_file:
        parser.set_defaults(**read_cfg_defaults(cfg_args.config_file,
                                                option_actions))

    args = parser.parse_args(arg_list)

    # Print help when no arguments are provided
    if len(sys.argv) == 1 and not unittest:
        parser.print_help()
        sys.exit(1)

    return args


def main():
    arguments = get_args()
    prephylo_arg_check(arguments)
    main_parser(arguments, arguments.infile)


if __name__ == "__main__":

    main()


__author__ = "Diogo N. Silva"
