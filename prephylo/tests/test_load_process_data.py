#!/usr/bin/python3
# -*- coding: utf-8 -*-

import unittest
from collections import OrderedDict

from prephylo.tests.data_files import *
from prephylo.process.sequence import Alignment, parse_fasta
from prephylo.process.base import Base
from prephylo.process.error_handling import *


class LoadAlignmentsTest(unittest.TestCase):

    def test_class_instance(self):

        aln = Alignment(concatenation_fas[0])
        self.assertIsInstance(aln.alignment, OrderedDict)

    def test_load_fas(self):

        aln = Alignment(concatenation_fas[0])

        self.assertEqual(aln.taxa_names, ["x", "y"])
        self.assertEqual(aln.locus_length, 100)

    def test_file_names(self):

        aln = Alignment(concatenation_fas[1])

        self.assertEqual([aln.name, aln.sname], ["geneB.fas", "geneB"])

    def test_load_multiline(self):

        aln = Alignment(multiline_fas[0])

        self.assertEqual(aln.alignment, OrderedDict([("a", "ACGTACGT"),
                                                     ("b", "TTTTGGGG")]))

    def test_load_malformed(self):

        self.assertRaises(MalformedInput,
                          lambda: Alignment(malformed_fas[0]))

    def test_load_duplicated(self):

        aln = Alignment(duplicated_fas[0])

        self.assertEqual(list(aln), [("a", "ACGT"), ("a", "ACGT")])

    def test_load_missing_file(self):

        self.assertRaises(ConfigurationError,
                          lambda: Alignment("no_such_file.fas"))

    def test_check_sizes(self):

        aln = Alignment(unequal_fas[0])

        self.assertRaises(AlignmentUnequalLength, aln.check_sizes)

    def test_unequal_is_malformed(self):

        aln = Alignment(unequal_fas[0])

        self.assertRaises(MalformedInput, aln.check_sizes)

    def test_from_string(self):

        aln = Alignment.from_string(">a\nAC-GT\n>b\n-CGGT\n", name="s")

        self.assertEqual([aln.sname, len(aln), aln.locus_length],
                         ["s", 2, 5])

    def test_empty_string(self):

        aln = Alignment.from_string("# nothing here\n\n")

        self.assertEqual([len(aln), aln.locus_length], [0, 0])


class FilterTaxaTest(unittest.TestCase):

    def test_filter_tab(self):

        taxa_filter = Base.read_taxa_filter(taxa_filter_tab[0])

        self.assertEqual(taxa_filter, set(["x", "y"]))

    def test_filter_fasta(self):

        taxa_filter = Base.read_taxa_filter(taxa_filter_fasta[0])

        self.assertEqual(taxa_filter, set(["x", "z"]))

    def test_filter_missing_file(self):

        self.assertRaises(ConfigurationError,
                          lambda: Base.read_taxa_filter("no_such_file.txt"))

    def test_load_filtered(self):

        aln = Alignment(concatenation_fas[1], taxa_filter=set(["z"]))

        self.assertEqual(list(aln.alignment.items()),
                         [("z", "CATG" * 12 + "--")])

    def test_filtered_sequence_lines_discarded(self):

        sequences = parse_fasta([">a\n", "AC\n", "GT\n", ">b\n", "TT\n",
                                 "TT\n", ">c\n", "CC\n"],
                                taxa_filter=set(["a", "c"]))

        self.assertEqual(sequences, [("a", "ACGT"), ("c", "CC")])

    def test_filter_all_taxa(self):

        aln = Alignment(concatenation_fas[0], taxa_filter=set(["w"]))

        self.assertEqual(len(aln), 0)


class NameMapTest(unittest.TestCase):

    def test_read_dictionary(self):

        name_map = Base.read_name_map(name_dictionary[0])

        self.assertEqual(name_map, OrderedDict([("x", "Xenopus"),
                                                ("z", "Zea")]))

    def test_dictionary_missing_file(self):

        self.assertRaises(ConfigurationError,
                          lambda: Base.read_name_map("no_such_file.txt"))


class GuessCodeTest(unittest.TestCase):

    def test_dna(self):

        self.assertEqual(Base.guess_code("ACGT--NNACGT"), "DNA")

    def test_protein(self):

        self.assertEqual(Base.guess_code("MKLVQEPRST"), "Protein")

    def test_duplicate_taxa(self):

        self.assertEqual(Base.duplicate_taxa(["a", "b", "a"]), ["a"])


if __name__ == "__main__":
    unittest.main()
