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

import re
import os
from collections import OrderedDict

from prephylo.process.error_handling import PrePhyloException, \
    ConfigurationError


class PartitionException(PrePhyloException):
    pass


class InvalidPartitionFile(PrePhyloException):
    pass


class DuplicatePartition(PartitionException):
    pass


class Partitions(object):
    """Alignment partitions interface for `Alignment` and `Concatenator`.

    The Partitions class is used in two situations. When splitting an
    alignment, it holds the partition table provided by the user in a
    RAxML-style partition file (or a Nexus charset block). During
    concatenation, it is the registry of the partitions that are added,
    one per alignment file, in the order the files are processed.

    Partitions may be set in two ways:

      - Partition files: Being Nexus charset blocks and RAxML partition files
        currently supported (see `read_from_file`)
      - Adding partitions one at a time with `add_partition`, either from
        the length of an alignment or from explicit ranges

    Attributes
    ----------
    partitions : OrderedDict
        Storage of partition names (key) and their ranges (values). Each
        range is a list with three elements [start, end, stride], with start
        and end in python index (first position is 0) and inclusive end.
    counter : int
        Indicator of where the last partition ended.
    partition_format : str
        Format of the original partition file, if any.
    """

    ribosomal_pattern = re.compile(r"^\d\dS$")
    """
    Partition names matching this pattern (16S, 28S, etc) are assumed to be
    ribosomal RNA genes and are not divided into codon positions in the
    RAxML partition file.
    """

    def __init__(self):

        self.partitions = OrderedDict()
        """
        partitions will contain the name and ranges of the partitions. An
        example of stored partitions is::

            partitions = {"partitionA": [[0, 855, 1]],
                          "partitionB": [[856, 1449, 3], [856, 900, 1]]}

        "partitionA" is a simple gene partition ranging from the first to the
        856th column, while "partitionB" selects every third column of its
        first range followed by all columns of the second range.
        """

        self.counter = 0
        """
        The counter attribute will be used as an indication of where the last
        partition ends when one or more partitions are added
        """

        self.partition_format = None

    def __iter__(self):
        """Iterator behavior for `Partitions`.

        Returns
        -------
        _ : iter
            Iterator of `partitions.items()`.
        """

        return iter(self.partitions.items())

    def __len__(self):
        return len(self.partitions)

    def reset(self):
        """Clears partitions and resets object to __init__ state."""

        self.partitions = OrderedDict()
        self.counter = 0
        self.partition_format = None

    def get_partition_names(self):
        """Returns a list with the name of the partitions, in the order
        they were added."""

        return list(self.partitions)

    def is_single(self):
        """Returns True if there is at most one partition defined."""

        return len(self.partitions) <= 1

    @staticmethod
    def _range_columns(lrange):
        return range(lrange[0], lrange[1] + 1, lrange[2])

    def get_columns(self, name):
        """Returns the columns selected by a partition.

        The columns of each range are listed in stride order, and the
        ranges are visited in the order they were defined.

        Parameters
        ----------
        name : str
            Name of the partition.

        Returns
        -------
        columns : list
            List of column indexes (python index).
        """

        columns = []
        for lrange in self.partitions[name]:
            columns.extend(self._range_columns(lrange))

        return columns

    def get_length(self, name):
        """Returns the number of columns selected by a partition."""

        return sum(len(self._range_columns(x)) for x in self.partitions[name])

    def add_partition(self, name, length=None, locus_range=None):
        """Adds a new partition.

        Adds a new partition providing the length or the ranges of the
        partition. If both are provided, the length takes precedence. When
        the length is provided, the partition starts right after the end of
        the last partition (given by `counter`). The ranges of the partition
        should be in python index, that is, the first position should be 0
        and not 1.

        Parameters
        ----------
        name : str
            Name of the partition.
        length : int, optional
            Length of the alignment.
        locus_range : list, optional
            List of ranges, each with the [start, end, stride] elements.

        Raises
        ------
        DuplicatePartition
            If `name` is already in the partition table.
        """

        # Check for duplicate names in partitions
        if name in self.partitions:
            raise DuplicatePartition("Partition name %s is already in "
                                     "partition table" % name)

        if length:
            self.partitions[name] = [[self.counter,
                                      self.counter + length - 1, 1]]
            self.counter += length

        elif locus_range:
            self.partitions[name] = [list(x) for x in locus_range]
            self.counter = max(self.counter,
                               max(x[1] for x in locus_range) + 1)

        else:
            raise PartitionException("Partition %s requires either a length "
                                     "or a range" % name)

    def iter_ranges(self):
        """Iterates over the contiguous range of each partition.

        This is meant for the partitions created during concatenation,
        where each partition has a single, contiguous range.

        Yields
        ------
        name : str
            Partition name.
        start : int
            First column of the partition (starting at 1).
        end : int
            Last column of the partition (starting at 1, inclusive).
        """

        for name, ranges in self.partitions.items():
            yield name, ranges[0][0] + 1, ranges[-1][1] + 1

    # =========================================================================
    # Parsers
    # =========================================================================

    @staticmethod
    def _get_file_format(partition_file):
        """Guesses the format of the partition file (Nexus or RAxML's).

        Returns
        -------
        partition_format : str
            Format of the partition file ("nexus" or "raxml").
        """

        with open(partition_file) as file_handle:
            for line in file_handle:
                # Skips empty and comment lines, if any
                if line.strip() and not line.startswith("#"):
                    break
            else:
                raise InvalidPartitionFile("Partition file %s is empty" %
                                           partition_file)

        fields = line.split()
        if fields[0].lower() == "charset":
            partition_format = "nexus"
        else:
            partition_format = "raxml"

        return partition_format

    @staticmethod
    def _parse_range(range_string):
        """Parses a single range string.

        Supported notations are "1-100" and "1-100\\3" (the stride
        separator may also be a "/").

        Returns
        -------
        lrange : list
            [start, end, stride] in python index.
        """

        fields = re.split(r"[-\\/]", range_string.strip())

        start, end = int(fields[0]), int(fields[1])
        stride = int(fields[2]) if len(fields) > 2 else 1

        if start < 1 or end < start or stride < 1:
            raise ValueError(range_string)

        return [start - 1, end - 1, stride]

    def read_from_file(self, partitions_file):
        """Parses partitions from file

        This method parses a file containing partitions. It supports
        partitions files similar to RAxML's and NEXUS charset blocks. The
        NEXUS file, however, must only contain the charset block. A RAxML
        line looks like::

            DNA, geneA = 1-300, 600-650
            DNA, geneA_codon3 = 3-300\\3

        Parameters
        ----------
        partitions_file : str
            Path to partitions file.

        Raises
        ------
        ConfigurationError
            When the partition file does not exist.
        InvalidPartitionFile
            When one partition definition cannot be parsed.
        """

        if not os.path.isfile(partitions_file):
            raise ConfigurationError("Partition file %s does not exist." %
                                     partitions_file)

        # Get the format of the partition file
        self.partition_format = self._get_file_format(partitions_file)

        # Resets previous partitions
        partition_format = self.partition_format
        self.reset()
        self.partition_format = partition_format

        with open(partitions_file) as part_file:
            for p, line in enumerate(part_file):

                # Ignore empty lines and comments
                if line.strip() == "" or line.startswith("#"):
                    continue

                if self.partition_format == "nexus":
                    self.read_from_nexus_string(line)
                    continue

                # A wrongly formatted raxml partition file may be provided, in
                # which case an IndexError or ValueError exception will be
                # raised. This will handle that exception
                try:
                    fields = line.split(",", 1)
                    # Get partition name as string
                    partition_name = fields[1].split("=")[0].strip()
                    # Get partition ranges
                    pr_temp = fields[1].split("=")[1]
                    partition_range = [self._parse_range(x) for x in
                                       pr_temp.strip().split(",")]

                except (IndexError, ValueError):
                    raise InvalidPartitionFile(
                        "Badly formatted partitions file in line {} "
                        "with:\n\n{}".format(p + 1, line))

                self.add_partition(partition_name,
                                   locus_range=partition_range)

    def read_from_nexus_string(self, nx_string):
        """Parses a single nexus string with partition definition.

        Parameters
        ----------
        nx_string : str
            String with partition definition, e.g.
            "charset geneA = 1-300\\3;".
        """

        try:
            fields = nx_string.split("=")
            partition_name = fields[0].split()[1].strip()

            partition_range = [
                self._parse_range(x) for x in
                fields[1].strip().replace(";", "").replace(",", " ").split()]

        except (IndexError, ValueError):
            raise InvalidPartitionFile("Badly formatted charset: %s" %
                                       nx_string)

        self.add_partition(partition_name, locus_range=partition_range)

    # =========================================================================
    # Writers
    # =========================================================================

    def _write_raxml(self, fh):

        for name, start, end in self.iter_ranges():
            # Ribosomal RNA genes
            if self.ribosomal_pattern.match(name):
                fh.write("DNA, %s = %s-%s\n" % (name, start, end))
            # Coding genes
            else:
                for i in range(3):
                    fh.write("DNA, %s-%s = %s-%s\\3\n" %
                             (name, i + 1, start + i, end))

    def _write_nexus(self, fh):

        for name, start, end in self.iter_ranges():
            fh.write("\tcharset %s = %s-%s;\n" % (name, start, end))

    def write_to_file(self, output_format, output_file):
        """Writes partitions to a file.

        Writes the Partitions object into an output file according to the
        output_format. The supported output formats are RAxML and Nexus.
        In the RAxML format, each coding gene is divided into its three
        codon positions.

        Parameters
        ----------
        output_format : str
            Output format of partitions file. Can be either "nexus" or
            "raxml".
        output_file : str
            Path to output file.
        """

        write_methods = {"raxml": self._write_raxml,
                         "nexus": self._write_nexus}

        with open(output_file, "w") as outfile_handle:
            write_methods[output_format](outfile_handle)


__author__ = "Diogo N. Silva"
