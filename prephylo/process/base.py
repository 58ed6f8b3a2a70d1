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
The `base` module includes the `Base` class, which is inherited by
`Alignment` and `Concatenator` and provides several methods of general use,
namely the loaders of the auxiliary files that PrePhylo receives (taxa
filter lists and translation dictionaries).

It also defines the `CleanUp` decorator used by PrePhylo to handle the
generation of temporary data during its execution, as well as keyboard
interruptions and fatal errors, and the `print_col` function used for
all terminal logging.
"""

from prephylo.process.error_handling import ConfigurationError, \
    PrePhyloException

import os
import sys
import time
import shutil
import traceback
from collections import OrderedDict, Counter

dna_chars = ["A", "T", "G", "C"]

# IUPAC codes that represent more than one nucleotide. N is left out since
# it is the symbol these codes are normalized to
ambiguity_codes = ["R", "Y", "M", "K", "W", "S", "B", "D", "H", "V"]

# Characters that make a column count as empty during trimming
empty_chars = ["-", "N", "?"]


class CleanUp(object):
    """Decorator class that handles temporary data for PrePhylo.

    This decorator class wraps the main execution function of the PrePhylo
    program. The __init__ requires only the function reference and defines
    the name of the temporary directory, where intermediate files (such as
    the Gblocks input and output) are stored. The only requirement of
    `func` is that its first argument is the argparser namespace (that is,
    the arguments must be parsed before calling the main function).

    Parameters
    ----------
    func : function
        Main function of PrePhylo

    Attributes
    ----------
    func : function
        Main function of PrePhylo
    temp_dir : str
        Path to temporary directory where the temporary data will be stored

    See Also
    --------
    print_col
    """

    def __init__(self, func):
        self.func = func
        # Set name of temporary directory
        self.temp_dir = ".prephylo-temp"

    def __call__(self, *args):
        """Wraps the call of `func`.

        When the main `func` is called, this code is wrapped around its
        execution. This ensures that the temporary data stored in
        `temp_dir` is removed at the end of the execution, whether it
        terminates successfully or not. Fatal errors raised by the process
        modules are reported and end the program with a non-zero exit
        status. It also clocks the duration of the execution.

        Parameters
        ----------
        args : list
            Arbitrary list of positional arguments of `func`. The only
            requirement is that the first element is the argparse namespace
            object.
        """

        quiet = args[0].quiet

        try:
            # Set starting time for clocking execution duration
            start_time = time.time()

            # Execute main function
            self.func(*args)

            # If program was not executed with 'quiet' flag, print final
            # execution message
            print_col("Program execution successfully completed in %s "
                      "seconds" % (round(time.time() - start_time, 2)),
                      GREEN, quiet=quiet)

        # Handle execution termination via Ctrl+C
        except KeyboardInterrupt:
            print_col("Interrupting, by your command", RED)

        # Known fatal conditions are reported without the traceback
        except PrePhyloException as e:
            print_col("%s: %s" % (type(e).__name__, e.message), RED)

        except Exception:
            traceback.print_exc()
            print_col("Program exited with errors!", RED)

        finally:
            # Removing temporary directory, if any
            if os.path.exists(self.temp_dir):
                shutil.rmtree(self.temp_dir)


def has_colours(stream):
    if not hasattr(stream, "isatty"):
        return False
    if not stream.isatty():
        return False  # auto color only on TTYs
    try:
        import curses
        curses.setupterm()
        return curses.tigetnum("colors") > 2
    except Exception:
        # guess false in case of error
        return False

# Support for terminal colors
BLACK, RED, GREEN, YELLOW, BLUE, MAGENTA, CYAN, WHITE = range(8)
has_colours = has_colours(sys.stdout)


def print_col(text, color, quiet=False):
    """Custom print function for terminal updates of PrePhylo.

    This print function homogenizes the progress logging of the CLI
    program while providing some freedom on the formatting of the
    progress message, namely the colors of the messages. The colors in use
    are green for normal logging, yellow for warnings and red for errors.
    The final formatting of the message is something like:

    [PrePhylo[-Error/Warning]] <message>

    Error messages are always printed and terminate the program with a
    non-zero exit status.

    Parameters
    ----------
    text : str
        The message that will appear in the terminal
    color : variable reference
        Reference to the terminal colors defined in process.base. Provided
        that they are imported in the module where they are being called, the
        options are: {GREEN, YELLOW, RED}
    quiet : bool
        Determines whether the message is logged. If True, no messages are
        printed to the terminal
    """

    if not quiet or color == RED:
        suf = {GREEN: "[PrePhylo] ", YELLOW: "[PrePhylo-Warning] ",
               RED: "[PrePhylo-Error] "}
        if has_colours:
            seq = "\x1b[1;%dm" % (30 + color) + suf[color] + "\x1b[0m" + text
        else:
            seq = suf[color] + text
        print(seq)

    if color == RED:
        raise SystemExit(1)


class Base(object):

    @staticmethod
    def guess_code(sequence):
        """Guess the sequence type, i.e. DNA or protein.

        Gaps and missing data are removed from the sequence so that the
        frequencies are not biased. If more than 90% of the remaining
        characters are nucleotides, the sequence is considered DNA.

        Parameters
        ----------
        sequence : str
            Sequence string that will be used to guess the type

        Returns
        -------
        code : str
            Either "DNA" or "Protein".
        """

        sequence = sequence.upper().replace("-", "").replace("?", "")

        if not sequence:
            return "DNA"

        dna_count = sum(sequence.count(x) for x in dna_chars + ["N"])

        dna_proportion = float(dna_count) / float(len(sequence))

        # The 0.9 cut-off has been effective so far
        if dna_proportion > 0.9:
            return "DNA"
        else:
            return "Protein"

    @staticmethod
    def duplicate_taxa(taxa_list):
        """
        Identified duplicate items in a list.

        Parameters
        ----------
        taxa_list : list
            List with taxon names

        Returns
        -------
        duplicated_taxa : list
            List with duplicated taxa from `taxa_list`
        """

        duplicated_taxa = [x for x, y in Counter(taxa_list).items()
                           if y > 1]

        return duplicated_taxa

    @staticmethod
    def read_taxa_filter(filter_file):
        """Reads the list of taxa that will be retained from the alignments.

        Two formats are supported and the first non-comment line decides
        which one is used. If it starts with ">", the file is a fasta file
        (or a list of fasta headers) and the taxon names are taken from the
        header lines only, up to the first whitespace. Otherwise, the taxon
        name is the first column of each tab delimited line.

        Parameters
        ----------
        filter_file : str
            Path to the filter file.

        Returns
        -------
        taxa_filter : set
            Set with the taxon names.

        Raises
        ------
        ConfigurationError
            When `filter_file` does not exist.
        """

        if not os.path.isfile(filter_file):
            raise ConfigurationError("Filter list %s does not exist." %
                                     filter_file)

        taxa_filter = set()
        is_fasta = None

        with open(filter_file) as fh:
            for line in fh:
                line = line.rstrip()

                if not line or line.startswith("#"):
                    continue

                if is_fasta is None:
                    is_fasta = line.startswith(">")

                if is_fasta:
                    if line.startswith(">") and line[1:].split():
                        taxa_filter.add(line[1:].split()[0])
                else:
                    taxa_filter.add(line.split("\t")[0])

        return taxa_filter

    @staticmethod
    def read_name_map(dictionary_file):
        """Reads a translation dictionary for taxon names.

        Each line of the dictionary contains the original name and its
        replacement separated by a tab. Empty lines, comment lines and
        lines without a replacement are ignored.

        Parameters
        ----------
        dictionary_file : str
            Path to the translation dictionary.

        Returns
        -------
        name_map : OrderedDict
            Maps the original taxon names (keys) to their replacement
            (values).

        Raises
        ------
        ConfigurationError
            When `dictionary_file` does not exist.
        """

        if not os.path.isfile(dictionary_file):
            raise ConfigurationError("Translation dictionary %s does not "
                                     "exist." % dictionary_file)

        name_map = OrderedDict()

        with open(dictionary_file) as fh:
            for line in fh:
                line = line.rstrip()

                if not line or line.startswith("#"):
                    continue

                fields = line.split("\t")
                if len(fields) > 1:
                    name_map[fields[0]] = fields[1]

        return name_map


__author__ = "Diogo N. Silva"
