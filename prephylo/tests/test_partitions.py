#!/usr/bin/python3

import os
import shutil
import unittest
from os.path import join

from prephylo.tests.data_files import *
from prephylo.process.sequence import Alignment
from prephylo.process.error_handling import *
from prephylo.process.data import Partitions, InvalidPartitionFile, \
    PartitionException, DuplicatePartition

temp_dir = ".temp"


class PartitonsTest(unittest.TestCase):

    def setUp(self):

        if not os.path.exists(temp_dir):
            os.makedirs(temp_dir)

        self.partitions = Partitions()

    def tearDown(self):

        shutil.rmtree(temp_dir)

    def test_read_from_file(self):

        self.partitions.read_from_file(raxml_partitions[0])

        self.assertEqual(self.partitions.partitions,
                         {"p1": [[0, 8, 3]],
                          "p2": [[1, 8, 3]],
                          "p3": [[2, 8, 3], [0, 1, 1]]})

    def test_read_format(self):

        self.partitions.read_from_file(raxml_partitions[0])

        self.assertEqual(self.partitions.partition_format, "raxml")

    def test_read_from_nexus(self):

        self.partitions.read_from_file(nexus_partitions[0])

        self.assertEqual([self.partitions.partition_format,
                          self.partitions.partitions],
                         ["nexus", {"p1": [[0, 8, 3]],
                                    "p2": [[1, 2, 1], [4, 5, 1]]}])

    def test_read_bad_file(self):

        self.assertRaises(InvalidPartitionFile,
                          lambda: self.partitions.read_from_file(
                              bad_partitions[0]))

    def test_read_missing_file(self):

        self.assertRaises(ConfigurationError,
                          lambda: self.partitions.read_from_file(
                              "no_such_file.txt"))

    def test_read_empty_file(self):

        empty_file = join(temp_dir, "empty.txt")
        with open(empty_file, "w") as fh:
            fh.write("# only comments\n\n")

        self.assertRaises(InvalidPartitionFile,
                          lambda: self.partitions.read_from_file(
                              empty_file))

    def test_bad_range(self):

        self.assertRaises(InvalidPartitionFile,
                          lambda: self.partitions.read_from_nexus_string(
                              "charset p1 = 9-2;"))

    def test_get_columns(self):

        self.partitions.read_from_file(raxml_partitions[0])

        self.assertEqual(self.partitions.get_columns("p3"),
                         [2, 5, 8, 0, 1])

    def test_get_length(self):

        self.partitions.read_from_file(raxml_partitions[0])

        self.assertEqual(self.partitions.get_length("p3"), 5)

    def test_add_partition(self):

        self.partitions.add_partition("geneA", length=100)
        self.partitions.add_partition("geneB", length=50)

        self.assertEqual([list(self.partitions.iter_ranges()),
                          self.partitions.counter],
                         [[("geneA", 1, 100), ("geneB", 101, 150)], 150])

    def test_duplicate_partition(self):

        self.partitions.add_partition("geneA", length=100)

        self.assertRaises(DuplicatePartition,
                          lambda: self.partitions.add_partition(
                              "geneA", length=10))

    def test_duplicate_is_partition_exception(self):

        self.partitions.add_partition("geneA", length=100)

        self.assertRaises(PartitionException,
                          lambda: self.partitions.add_partition(
                              "geneA", length=10))

    def test_is_single(self):

        self.partitions.add_partition("geneA", length=100)
        single = self.partitions.is_single()
        self.partitions.add_partition("geneB", length=50)

        self.assertEqual([single, self.partitions.is_single()],
                         [True, False])

    def test_write_raxml(self):

        self.partitions.add_partition("geneA", length=100)
        self.partitions.add_partition("16S", length=12)
        self.partitions.add_partition("geneB", length=50)

        output_file = join(temp_dir, "partitions.txt")
        self.partitions.write_to_file("raxml", output_file)

        with open(output_file) as fh:
            self.assertEqual(fh.read(),
                             "DNA, geneA-1 = 1-100\\3\n"
                             "DNA, geneA-2 = 2-100\\3\n"
                             "DNA, geneA-3 = 3-100\\3\n"
                             "DNA, 16S = 101-112\n"
                             "DNA, geneB-1 = 113-162\\3\n"
                             "DNA, geneB-2 = 114-162\\3\n"
                             "DNA, geneB-3 = 115-162\\3\n")

    def test_ribosomal_pattern_is_literal(self):

        self.partitions.add_partition("116S", length=10)
        self.partitions.add_partition("s16S", length=10)

        output_file = join(temp_dir, "partitions.txt")
        self.partitions.write_to_file("raxml", output_file)

        with open(output_file) as fh:
            self.assertEqual(len(fh.readlines()), 6)

    def test_write_nexus(self):

        self.partitions.add_partition("geneA", length=100)
        self.partitions.add_partition("geneB", length=50)

        output_file = join(temp_dir, "partitions.nex")
        self.partitions.write_to_file("nexus", output_file)

        with open(output_file) as fh:
            self.assertEqual(fh.read(), "\tcharset geneA = 1-100;\n"
                                        "\tcharset geneB = 101-150;\n")

    def test_write_read_raxml(self):

        self.partitions.add_partition("16S", length=12)
        self.partitions.add_partition("28S", length=20)

        output_file = join(temp_dir, "partitions.txt")
        self.partitions.write_to_file("raxml", output_file)

        new_partitions = Partitions()
        new_partitions.read_from_file(output_file)

        self.assertEqual(new_partitions.partitions,
                         self.partitions.partitions)


class SplitPartitionsTest(unittest.TestCase):

    def setUp(self):

        self.aln = Alignment(codon_fas[0])
        self.partitions = Partitions()

    def test_stride_partition(self):

        self.partitions.read_from_nexus_string("charset p1 = 1-9\\3;")
        split = self.aln.split_partitions(self.partitions)

        self.assertEqual(list(split["p1"].alignment.items()),
                         [("t1", "ACG"), ("t2", "AAA")])

    def test_split_from_file(self):

        self.partitions.read_from_file(raxml_partitions[0])
        split = self.aln.split_partitions(self.partitions)

        self.assertEqual(
            [list(x.alignment.values()) for x in split.values()],
            [["ACG", "AAA"], ["ACG", "TTT"], ["ACGAA", "GGGAT"]])

    def test_split_names(self):

        self.partitions.read_from_file(nexus_partitions[0])
        split = self.aln.split_partitions(self.partitions)

        self.assertEqual([list(split), split["p2"].sname,
                          split["p2"].alignment["t1"]],
                         [["p1", "p2"], "p2", "AACC"])

    def test_split_out_of_bounds(self):

        self.partitions.read_from_file(outbound_partitions[0])

        self.assertRaises(PartitionException,
                          lambda: self.aln.split_partitions(
                              self.partitions))

    def test_split_unequal(self):

        self.partitions.read_from_file(raxml_partitions[0])
        aln = Alignment(unequal_fas[0])

        self.assertRaises(AlignmentUnequalLength,
                          lambda: aln.split_partitions(self.partitions))


class SplitCodonsTest(unittest.TestCase):

    def test_split_codons(self):

        aln = Alignment(codon_fas[0])
        codons = aln.split_codons()

        self.assertEqual([list(x.alignment.items()) for x in codons],
                         [[("t1", "ACG"), ("t2", "AAA")],
                          [("t1", "ACG"), ("t2", "TTT")],
                          [("t1", "ACG"), ("t2", "GGG")]])

    def test_split_codons_names(self):

        aln = Alignment(codon_fas[0])

        self.assertEqual([x.sname for x in aln.split_codons()],
                         ["codons.codon1", "codons.codon2",
                          "codons.codon3"])

    def test_split_codons_uneven(self):

        aln = Alignment.from_string(">a\nACGTA\n")
        codons = [x.alignment["a"] for x in aln.split_codons()]

        self.assertEqual(codons, ["AT", "CA", "G"])

    def test_split_codons_reconstruct(self):

        aln = Alignment.from_string(">a\nATGCCAGTTAG\n>b\nATG-CAGTAAG\n")
        codons = aln.split_codons()

        for taxon, seq in aln:
            frames = [x.alignment[taxon] for x in codons]
            self.assertEqual(sum(len(x) for x in frames), len(seq))
            for j in range(len(frames[2])):
                self.assertEqual(frames[0][j] + frames[1][j] + frames[2][j],
                                 seq[3 * j:3 * j + 3])


if __name__ == "__main__":
    unittest.main()
