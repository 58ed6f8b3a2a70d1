"""
Welcome to the PrePhylo API reference guide. This reference guide details
the sub-packages and modules used for each component of PrePhylo.

What is PrePhylo
================

PrePhylo prepares multiple sequence alignments for phylogenetic analyses.
It is meant to be run right before tree building programs such as RAxML,
MrBayes or BEAST, and takes care of the tedious edits that these programs
require:

    - Cleaning of the alignments: removal of empty columns, replacement of
      terminal and long internal gaps and of ambiguity codes by 'N', or
      removal of all gaps. Gblocks may also be executed on each alignment.
    - Taxa names: filtering of taxa, sorting, translation with a dictionary
      or replacement by numerical names.
    - Splitting of alignments by codon position or by partitions.
    - Conversion into the Fasta, Nexus, Phylip and PIR formats.
    - Concatenation of several single gene alignments into a supermatrix,
      with the corresponding partition table for RAxML, BEAST or MrBayes.

How can PrePhylo be used
========================

PrePhylo can be used as a:

    - Command line application (PrePhylo).
    - Library of classes to parse, modify, split, concatenate and export
      alignment data.

Components of PrePhylo
======================

The command line interface is defined in :mod:`prephylo.PrePhylo`, with the
sanity checks of its options in :mod:`prephylo.base.sanity`.

The main functionality is provided by the modules in the
:mod:`prephylo.process` sub package. Alignments and their concatenation are
handled in :mod:`prephylo.process.sequence`, while partition tables are
handled in the :mod:`prephylo.process.data` module.
"""

__version__ = "0.1.0"
__build__ = "181026"
__author__ = "Diogo N. Silva"
__copyright__ = "Diogo N. Silva"
__credits__ = ["Diogo N. Silva"]
__license__ = "GPL3"
__maintainer__ = "Diogo N. Silva"
__email__ = "o.diogosilva@gmail.com"
__status__ = "4 - Beta"
