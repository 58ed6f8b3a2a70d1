#!/usr/bin/python3

import os
import shutil
import unittest
from os.path import join

from prephylo.tests.data_files import *
from prephylo.process.sequence import Alignment, OutputFormat, phylip_name

output_dir = "output"


class ProcessWriteSinglesTest(unittest.TestCase):

    def setUp(self):

        if not os.path.exists(output_dir):
            os.makedirs(output_dir)

        self.aln = Alignment.from_string(">a\nACNGT\n>longtaxonname\n"
                                         "AC-GN\n")

    def tearDown(self):

        shutil.rmtree(output_dir)

    def test_write_fasta(self):

        self.assertEqual(self.aln.to_string(OutputFormat.FASTA),
                         ">a\nACNGT\n>longtaxonname\nAC-GN\n")

    def test_write_nexus(self):

        self.assertEqual(self.aln.to_string(OutputFormat.NEXUS),
                         "#NEXUS\nbegin data;\n"
                         "\tdimensions ntax=2 nchar=5;\n"
                         "\tformat datatype=dna missing=? gap=-;\n"
                         "matrix\n"
                         "[1] a\tAC?GT\n"
                         "[2] longtaxonname\tAC-G?\n"
                         ";\nend;\n")

    def test_write_phylip(self):

        self.assertEqual(self.aln.to_string(OutputFormat.PHYLIP),
                         " 2 5\n"
                         "a" + " " * 12 + "ACNGT\n"
                         "longtaxonn   AC-GN\n")

    def test_write_pir(self):

        self.assertEqual(self.aln.to_string(OutputFormat.PIR),
                         ">DL; a\na.\nACNGT*\n"
                         ">DL; longtaxonname\nlongtaxonname.\nAC-GN*\n")

    def test_format_as_string(self):

        self.assertEqual(self.aln.to_string("pir"),
                         self.aln.to_string(OutputFormat.PIR))

    def test_write_to_file(self):

        output_file = join(output_dir, "test.nex")
        self.aln.write_to_file(OutputFormat.NEXUS, output_file)

        with open(output_file) as fh:
            self.assertEqual(fh.read(),
                             self.aln.to_string(OutputFormat.NEXUS))

    def test_writer_does_not_modify(self):

        self.aln.to_string(OutputFormat.NEXUS)

        self.assertEqual(self.aln.alignment["a"], "ACNGT")

    def test_fasta_round_trip(self):

        aln = Alignment(concatenation_fas[0])
        output_file = join(output_dir, "geneA.fas")
        aln.write_to_file(OutputFormat.FASTA, output_file)

        new_aln = Alignment(output_file)

        self.assertEqual(list(new_aln.alignment.items()),
                         list(aln.alignment.items()))

    def test_phylip_name(self):

        self.assertEqual([phylip_name("abc"), phylip_name("a" * 12)],
                         ["abc       ", "a" * 10])


if __name__ == "__main__":
    unittest.main()
