#!/usr/bin/python3

import os
import sys
import shutil
import unittest
from os.path import join

from prephylo.tests.data_files import *
from prephylo.process.sequence import Alignment
from prephylo.process.gblocks import run_gblocks, gblocks_command
from prephylo.process.error_handling import *

temp_dir = ".temp"

# Writes the sequences in blocks of ten characters, like Gblocks does
fake_gblocks = """#!/bin/sh
sed '/^>/!s/\\(..........\\)/\\1 /g' "$1" > "$1.gb"
"""

broken_gblocks = """#!/bin/sh
exit 1
"""


class GblocksCommandTest(unittest.TestCase):

    def test_dna_command(self):

        self.assertEqual(gblocks_command("Gblocks", "in.fasta", 5),
                         ["Gblocks", "in.fasta", "-t=d", "-b2=3", "-b3=3",
                          "-b4=6", "-b5=a", "-e=.gb"])

    def test_codon_command(self):

        cmd = gblocks_command("Gblocks", "in.fasta", 10, "codon")

        self.assertEqual(cmd[2:4], ["-t=c", "-b2=6"])

    def test_protein_command(self):

        cmd = gblocks_command("Gblocks", "in.fasta", 1, "protein")

        self.assertEqual(cmd[2:4], ["-t=p", "-b2=1"])


@unittest.skipIf(sys.platform in ["win32", "cygwin"],
                 "Requires a POSIX shell")
class RunGblocksTest(unittest.TestCase):

    def setUp(self):

        if not os.path.exists(temp_dir):
            os.makedirs(temp_dir)

        self.gblocks_bin = self._write_script("Gblocks", fake_gblocks)

    def tearDown(self):

        shutil.rmtree(temp_dir)

    @staticmethod
    def _write_script(name, content):

        path = join(temp_dir, name)
        with open(path, "w") as fh:
            fh.write(content)
        os.chmod(path, 0o755)

        return path

    def test_run_gblocks(self):

        aln = Alignment(concatenation_fas[0])
        original = list(aln.alignment.items())

        run_gblocks(aln, self.gblocks_bin, "dna", join(temp_dir, "work"))

        self.assertEqual(list(aln.alignment.items()), original)

    def test_run_gblocks_cleans_files(self):

        aln = Alignment(concatenation_fas[0])
        run_gblocks(aln, self.gblocks_bin, "dna", join(temp_dir, "work"))

        self.assertEqual(os.listdir(join(temp_dir, "work")), [])

    def test_missing_output(self):

        broken_bin = self._write_script("broken", broken_gblocks)
        aln = Alignment(concatenation_fas[0])

        self.assertRaises(GblocksError,
                          lambda: run_gblocks(aln, broken_bin, "dna",
                                              temp_dir))

    def test_missing_executable(self):

        aln = Alignment(concatenation_fas[0])

        self.assertRaises(ConfigurationError,
                          lambda: run_gblocks(aln, join(temp_dir, "none"),
                                              "dna", temp_dir))


if __name__ == "__main__":
    unittest.main()
